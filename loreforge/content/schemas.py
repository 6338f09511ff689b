"""Pydantic models for canonical records and pipeline outputs.

Layers / roles:
    Shared primitives   : Feature, ScoredEntry, ArmorClassEntry, HitPoints, ...
    Domain records      : NpcRecord, MonsterRecord, ItemRecord, LocationRecord,
                          StoryArcRecord, EncounterRecord, WritingRecord, NonfictionRecord.
    ContentBlock        : Public shape handed to the persistence layer.

Every record is fully shaped: list fields default to [], strings to "" and
sub-structures to their empty model. Optional scalars stay None until a
normalizer resolves them and are dropped from ``to_payload()`` output.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DomainTag(str, Enum):
    NPC = "npc"
    MONSTER = "monster"
    ITEM = "item"
    LOCATION = "location"
    STORY_ARC = "story-arc"
    ENCOUNTER = "encounter"
    WRITING = "writing"
    NONFICTION = "nonfiction"
    GENERIC = "generic"


class ContentType(str, Enum):
    TEXT = "text"
    OUTLINE = "outline"
    CHAPTER = "chapter"
    SECTION = "section"
    CHARACTER = "character"
    LOCATION = "location"
    ITEM = "item"
    STAT_BLOCK = "stat-block"
    FACT = "fact"
    STORY_ARC = "story-arc"
    MONSTER = "monster"


ABILITY_KEYS = ("str", "dex", "con", "int", "wis", "cha")


class CanonicalModel(BaseModel):
    """Base for all canonical structures (alias-aware, None-free dumps)."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Shared primitives
# ---------------------------------------------------------------------------

class Feature(CanonicalModel):
    name: str
    description: str
    uses: Optional[str] = None
    recharge: Optional[str] = None
    notes: Optional[str] = None


class MonsterFeature(Feature):
    attack_bonus: Optional[str] = None
    damage: Optional[str] = None
    cost: Optional[int] = None


class ScoredEntry(CanonicalModel):
    name: str
    value: str
    notes: Optional[str] = None


class ArmorClassEntry(CanonicalModel):
    value: int
    type: Optional[str] = None
    notes: Optional[str] = None


ArmorClass = Union[int, List[ArmorClassEntry]]


class HitPoints(CanonicalModel):
    average: Optional[int] = None
    formula: Optional[str] = None
    notes: Optional[str] = None


class Relationship(CanonicalModel):
    entity: str = ""
    relationship: str = ""
    notes: Optional[str] = None


class ClassLevel(CanonicalModel):
    class_name: str = Field("", alias="class")
    level: Optional[int] = None
    subclass: Optional[str] = None
    notes: Optional[str] = None


class SpellcastingSummary(CanonicalModel):
    type: Optional[str] = None
    ability: Optional[str] = None
    save_dc: Optional[int] = None
    attack_bonus: Optional[int] = None
    notes: Optional[str] = None
    spell_slots: Dict[str, Any] = Field(default_factory=dict)
    prepared_spells: Dict[str, Any] = Field(default_factory=dict)
    innate_spells: Dict[str, Any] = Field(default_factory=dict)
    known_spells: List[str] = Field(default_factory=list)


class Personality(CanonicalModel):
    traits: List[str] = Field(default_factory=list)
    ideals: List[str] = Field(default_factory=list)
    bonds: List[str] = Field(default_factory=list)
    flaws: List[str] = Field(default_factory=list)


def default_ability_scores() -> Dict[str, int]:
    return {key: 10 for key in ABILITY_KEYS}


# ---------------------------------------------------------------------------
# NPC
# ---------------------------------------------------------------------------

class NpcRecord(CanonicalModel):
    name: str = "Unknown NPC"
    title: str = ""
    aliases: List[str] = Field(default_factory=list)
    role: str = ""
    description: str = ""
    appearance: str = ""
    background: str = ""
    race: str = ""
    size: str = ""
    creature_type: str = ""
    subtype: str = ""
    alignment: str = ""
    affiliation: str = ""
    location: str = ""
    era: str = ""
    challenge_rating: str = ""
    experience_points: Optional[int] = None
    hooks: List[str] = Field(default_factory=list)
    motivations: List[str] = Field(default_factory=list)
    tactics: str = ""
    class_levels: List[ClassLevel] = Field(default_factory=list)
    ability_scores: Dict[str, int] = Field(default_factory=default_ability_scores)
    armor_class: Optional[ArmorClass] = None
    hit_points: Optional[HitPoints] = None
    hit_dice: str = ""
    proficiency_bonus: Optional[Union[int, str]] = None
    speed: Dict[str, Any] = Field(default_factory=dict)
    saving_throws: List[ScoredEntry] = Field(default_factory=list)
    skill_proficiencies: List[ScoredEntry] = Field(default_factory=list)
    senses: List[str] = Field(default_factory=list)
    passive_perception: Optional[int] = None
    languages: List[str] = Field(default_factory=list)
    damage_resistances: List[str] = Field(default_factory=list)
    damage_immunities: List[str] = Field(default_factory=list)
    damage_vulnerabilities: List[str] = Field(default_factory=list)
    condition_immunities: List[str] = Field(default_factory=list)
    class_features: List[Feature] = Field(default_factory=list)
    subclass_features: List[Feature] = Field(default_factory=list)
    racial_features: List[Feature] = Field(default_factory=list)
    feats: List[Feature] = Field(default_factory=list)
    asi_choices: List[Dict[str, Any]] = Field(default_factory=list)
    background_feature: Optional[Dict[str, Any]] = None
    abilities: List[Feature] = Field(default_factory=list)
    additional_traits: List[Feature] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    magic_items: List[str] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)
    allies: List[str] = Field(default_factory=list)
    foes: List[str] = Field(default_factory=list)
    personality: Personality = Field(default_factory=Personality)
    spellcasting: Optional[SpellcastingSummary] = None
    actions: List[Feature] = Field(default_factory=list)
    bonus_actions: List[Feature] = Field(default_factory=list)
    reactions: List[Feature] = Field(default_factory=list)
    legendary_actions: Dict[str, Any] = Field(default_factory=dict)
    mythic_actions: Dict[str, Any] = Field(default_factory=dict)
    lair_actions: List[str] = Field(default_factory=list)
    regional_effects: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    sources_used: List[str] = Field(default_factory=list)
    assumptions: List[str] = Field(default_factory=list)
    proposals: List[Any] = Field(default_factory=list)
    schema_version: Optional[str] = None
    stat_block: Dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Monster
# ---------------------------------------------------------------------------

class ActionBlock(CanonicalModel):
    summary: str = ""
    options: List[MonsterFeature] = Field(default_factory=list)


class MonsterRecord(CanonicalModel):
    name: str = "Unnamed Monster"
    description: str = ""
    size: str = ""
    creature_type: str = ""
    subtype: str = ""
    alignment: str = ""
    challenge_rating: str = ""
    experience_points: int = 0
    proficiency_bonus: int = 2
    ability_scores: Dict[str, int] = Field(default_factory=default_ability_scores)
    armor_class: ArmorClass = 0
    hit_points: HitPoints = Field(default_factory=lambda: HitPoints(average=0))
    hit_dice: str = ""
    speed: Dict[str, Any] = Field(default_factory=dict)
    saving_throws: List[ScoredEntry] = Field(default_factory=list)
    skill_proficiencies: List[ScoredEntry] = Field(default_factory=list)
    damage_vulnerabilities: List[str] = Field(default_factory=list)
    damage_resistances: List[str] = Field(default_factory=list)
    damage_immunities: List[str] = Field(default_factory=list)
    condition_immunities: List[str] = Field(default_factory=list)
    senses: List[str] = Field(default_factory=list)
    passive_perception: int = 0
    languages: List[str] = Field(default_factory=list)
    abilities: List[MonsterFeature] = Field(default_factory=list)
    actions: List[MonsterFeature] = Field(default_factory=list)
    bonus_actions: List[MonsterFeature] = Field(default_factory=list)
    reactions: List[MonsterFeature] = Field(default_factory=list)
    multiattack: str = ""
    spellcasting: Dict[str, Any] = Field(default_factory=dict)
    legendary_actions: ActionBlock = Field(default_factory=ActionBlock)
    mythic_actions: ActionBlock = Field(default_factory=ActionBlock)
    lair_actions: List[str] = Field(default_factory=list)
    regional_effects: List[str] = Field(default_factory=list)
    location: str = ""
    ecology: str = ""
    lore: str = ""
    tactics: str = ""
    notes: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Item
# ---------------------------------------------------------------------------

class Attunement(CanonicalModel):
    required: bool = False
    restrictions: str = ""


class ItemProperty(CanonicalModel):
    name: str
    description: str
    activation: Optional[str] = None
    uses: Optional[str] = None
    recharge: Optional[str] = None
    save_dc: Optional[int] = None
    save_type: Optional[str] = None
    damage: Optional[str] = None
    bonus: Optional[str] = None
    duration: Optional[str] = None
    range: Optional[str] = None
    notes: Optional[str] = None


class Charges(CanonicalModel):
    maximum: int = 0
    recharge: str = ""
    on_last_charge: str = ""


class ItemSpell(CanonicalModel):
    name: str
    level: Optional[int] = None
    charges_cost: Optional[int] = None
    notes: Optional[str] = None


class PreviousOwner(CanonicalModel):
    name: str
    era: Optional[str] = None
    notable_deed: Optional[str] = None


class Curse(CanonicalModel):
    is_cursed: bool = False
    description: str = ""
    trigger: str = ""
    removal: str = ""
    hidden: bool = False


class Sentience(CanonicalModel):
    is_sentient: bool = False
    alignment: str = ""
    intelligence: int = 0
    wisdom: int = 0
    charisma: int = 0
    communication: str = ""
    senses: str = ""
    purpose: str = ""
    personality: str = ""
    conflict: str = ""


class ItemRecord(CanonicalModel):
    name: str = "Unnamed Item"
    item_type: str = ""
    item_subtype: str = ""
    rarity: str = ""
    attunement: Attunement = Field(default_factory=Attunement)
    description: str = ""
    appearance: str = ""
    weight: str = ""
    value: str = ""
    properties_v2: List[ItemProperty] = Field(default_factory=list)
    charges: Charges = Field(default_factory=Charges)
    spells: List[ItemSpell] = Field(default_factory=list)
    weapon_properties: Dict[str, Any] = Field(default_factory=dict)
    armor_properties: Dict[str, Any] = Field(default_factory=dict)
    history: str = ""
    creator: str = ""
    previous_owners: List[PreviousOwner] = Field(default_factory=list)
    quirks: List[str] = Field(default_factory=list)
    curse: Curse = Field(default_factory=Curse)
    sentience: Sentience = Field(default_factory=Sentience)
    campaign_hooks: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    # legacy
    type: str = ""
    properties: List[str] = Field(default_factory=list)
    abilities: List[str] = Field(default_factory=list)
    usage: str = ""
    drawbacks: str = ""
    mechanics: Dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

class LocationRecord(CanonicalModel):
    name: str = "Unnamed Location"
    region: str = ""
    description: str = ""
    history: str = ""
    key_features: List[str] = Field(default_factory=list)
    inhabitants: List[str] = Field(default_factory=list)
    hooks: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Story arc
# ---------------------------------------------------------------------------

class StoryArcAct(CanonicalModel):
    name: str
    summary: str = ""
    key_events: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    climax: str = ""
    transition: str = ""


class StoryArcBeat(CanonicalModel):
    name: str
    description: str = ""
    act: str = ""
    type: str = "plot"
    required: bool = True


class CharacterMotivation(CanonicalModel):
    purpose: str = ""
    reason: str = ""


class CharacterGoal(CanonicalModel):
    target: str = ""
    achievement: str = ""


class StoryArcCharacter(CanonicalModel):
    name: str
    role: str = ""
    description: str = ""
    motivation: CharacterMotivation = Field(default_factory=CharacterMotivation)
    goals: List[CharacterGoal] = Field(default_factory=list)
    known_barriers: List[str] = Field(default_factory=list)
    unknown_barriers: List[str] = Field(default_factory=list)
    arc: str = ""
    first_appearance: str = ""


class StoryArcFaction(CanonicalModel):
    name: str
    description: str = ""
    goals: List[str] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)
    relationship_to_party: str = ""


class BranchOption(CanonicalModel):
    choice: str
    consequence: str = ""


class BranchingPath(CanonicalModel):
    decision_point: str
    options: List[BranchOption] = Field(default_factory=list)


class StoryArcReward(CanonicalModel):
    name: str
    type: str = ""
    when: str = ""


class StoryArcSecret(CanonicalModel):
    secret: str
    discovery_method: str = ""
    impact: str = ""


class StoryArcRecord(CanonicalModel):
    title: str = "Untitled Story Arc"
    synopsis: str = ""
    theme: str = ""
    tone: str = ""
    setting: str = ""
    level_range: str = ""
    estimated_sessions: str = ""
    overarching_goal: str = ""
    hook: str = ""
    acts: List[StoryArcAct] = Field(default_factory=list)
    beats: List[StoryArcBeat] = Field(default_factory=list)
    characters: List[StoryArcCharacter] = Field(default_factory=list)
    factions: List[StoryArcFaction] = Field(default_factory=list)
    known_barriers: List[str] = Field(default_factory=list)
    unknown_barriers: List[str] = Field(default_factory=list)
    branching_paths: List[BranchingPath] = Field(default_factory=list)
    rewards: List[StoryArcReward] = Field(default_factory=list)
    clues_and_secrets: List[StoryArcSecret] = Field(default_factory=list)
    dm_notes: List[str] = Field(default_factory=list)
    acts_legacy: List[str] = Field(default_factory=list)
    beats_legacy: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Encounter
# ---------------------------------------------------------------------------

class EncounterMonster(CanonicalModel):
    name: str
    count: int = 1
    cr: str = ""
    xp: int = 0
    ac: int = 0
    hp: int = 0
    speed: str = ""
    role: str = ""
    positioning: str = ""
    key_abilities: List[str] = Field(default_factory=list)
    source: str = ""
    notes: str = ""


class EncounterNpc(CanonicalModel):
    name: str
    role: str = ""
    affiliation: str = ""
    motivation: str = ""
    stat_reference: str = ""
    notes: str = ""


class TerrainFeature(CanonicalModel):
    name: str = ""
    effect: str = ""
    dc: Optional[int] = None
    cover: Optional[str] = None
    movement_cost: Optional[str] = None


class Terrain(CanonicalModel):
    description: str = ""
    features: List[TerrainFeature] = Field(default_factory=list)
    lighting: str = ""
    elevation: str = ""
    weather: str = ""
    map_dimensions: str = ""


class EncounterHazard(CanonicalModel):
    name: str
    description: str = ""
    impact: str = ""
    dc: Optional[int] = None
    damage: Optional[str] = None
    trigger: Optional[str] = None
    mitigation: Optional[str] = None


class EncounterTrap(CanonicalModel):
    name: str
    trigger: str = ""
    effect: str = ""
    dc: int = 0
    damage: Optional[str] = None
    disarm: Optional[str] = None
    detection_dc: Optional[int] = None


class EncounterTactics(CanonicalModel):
    opening_moves: str = ""
    focus_targets: str = ""
    resource_usage: str = ""
    fallback_plan: str = ""
    morale: str = ""
    coordination: str = ""


class EventClockPhase(CanonicalModel):
    name: str = ""
    trigger: str = ""
    outcome: str = ""
    round: Optional[int] = None


class EventClock(CanonicalModel):
    summary: str = ""
    phases: List[EventClockPhase] = Field(default_factory=list)


class Currency(CanonicalModel):
    cp: int = 0
    sp: int = 0
    ep: int = 0
    gp: int = 0
    pp: int = 0


class TreasureItem(CanonicalModel):
    name: str
    rarity: Optional[str] = None
    description: Optional[str] = None
    value: Optional[str] = None


class Treasure(CanonicalModel):
    currency: Currency = Field(default_factory=Currency)
    items: List[TreasureItem] = Field(default_factory=list)
    boons: List[str] = Field(default_factory=list)


class Consequences(CanonicalModel):
    success: str = ""
    failure: str = ""
    partial: str = ""
    story_hooks: List[str] = Field(default_factory=list)


class Scaling(CanonicalModel):
    easier: str = ""
    harder: str = ""
    party_size_adjust: str = ""


class EncounterEnemy(CanonicalModel):
    name: str
    role: str = ""
    tactics: str = ""
    quantity: int = 1
    stat_block: Dict[str, Any] = Field(default_factory=dict)


class EncounterRecord(CanonicalModel):
    title: str = "Untitled Encounter"
    description: str = ""
    encounter_type: str = ""
    difficulty_tier: str = ""
    party_level: Optional[int] = None
    party_size: Optional[int] = None
    xp_budget: Optional[int] = None
    adjusted_xp: Optional[int] = None
    expected_duration_rounds: Optional[int] = None
    location: str = ""
    setting_context: str = ""
    objectives: List[str] = Field(default_factory=list)
    failure_conditions: List[str] = Field(default_factory=list)
    monsters: List[EncounterMonster] = Field(default_factory=list)
    npcs: List[EncounterNpc] = Field(default_factory=list)
    terrain: Terrain = Field(default_factory=Terrain)
    hazards: List[EncounterHazard] = Field(default_factory=list)
    traps: List[EncounterTrap] = Field(default_factory=list)
    tactics: EncounterTactics = Field(default_factory=EncounterTactics)
    event_clock: EventClock = Field(default_factory=EventClock)
    treasure: Treasure = Field(default_factory=Treasure)
    consequences: Consequences = Field(default_factory=Consequences)
    scaling: Scaling = Field(default_factory=Scaling)
    notes: List[str] = Field(default_factory=list)
    # legacy
    hooks: List[str] = Field(default_factory=list)
    environment: str = ""
    enemies: List[EncounterEnemy] = Field(default_factory=list)
    loot: List[str] = Field(default_factory=list)
    stat_blocks: List[Dict[str, Any]] = Field(default_factory=list)
    phases: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Prose
# ---------------------------------------------------------------------------

class WritingRecord(CanonicalModel):
    title: str = "Draft"
    subtitle: str = ""
    summary: str = ""
    outline: List[str] = Field(default_factory=list)
    table_of_contents: List[str] = Field(default_factory=list)
    text: str = ""


class NonfictionChapter(CanonicalModel):
    title: str = ""
    summary: str = ""
    key_points: List[str] = Field(default_factory=list)
    draft_text: str = ""


class NonfictionRecord(CanonicalModel):
    title: str = "Non-Fiction"
    subtitle: str = ""
    medium: str = ""
    table_of_contents: List[str] = Field(default_factory=list)
    purpose: str = ""
    thesis: str = ""
    keywords: List[str] = Field(default_factory=list)
    outline: List[str] = Field(default_factory=list)
    formatted_manuscript: str = ""
    chapters: List[NonfictionChapter] = Field(default_factory=list)


CanonicalRecord = Union[
    NpcRecord,
    MonsterRecord,
    ItemRecord,
    LocationRecord,
    StoryArcRecord,
    EncounterRecord,
    WritingRecord,
    NonfictionRecord,
]


class StructuredContent(BaseModel):
    type: DomainTag
    data: Dict[str, Any]


class ContentBlock(BaseModel):
    """Mapped content block handed to the persistence layer."""

    title: str
    type: ContentType
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def structured_content(self) -> Dict[str, Any]:
        return self.metadata.get("structuredContent", {})
