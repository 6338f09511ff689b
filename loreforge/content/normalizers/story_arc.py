"""Story arc normalizer.

``acts`` and ``beats`` come either as plain strings (older generators) or as
objects. String entries become minimal objects and are also kept verbatim in
``acts_legacy`` / ``beats_legacy``.
"""

from typing import Any, List, Optional, Tuple

from loreforge.content.coercion import (
    ensure_array,
    ensure_object,
    ensure_string,
    ensure_string_array,
    first_filled,
    merge_draft,
    sub_object,
)
from loreforge.content.schemas import (
    BranchingPath,
    BranchOption,
    CharacterGoal,
    CharacterMotivation,
    StoryArcAct,
    StoryArcBeat,
    StoryArcCharacter,
    StoryArcFaction,
    StoryArcRecord,
    StoryArcReward,
    StoryArcSecret,
)

WRAPPER_KEYS = ("story_arc", "storyArc", "arc")
ALIAS_KEYS = WRAPPER_KEYS + (
    "draft", "summary", "goal", "objective", "inciting_incident", "milestones", "barriers",
    "secrets", "gm_notes",
)


def _goal(entry: Any) -> Optional[CharacterGoal]:
    if isinstance(entry, str):
        return CharacterGoal(target=entry.strip()) if entry.strip() else None
    obj = ensure_object(entry)
    target = ensure_string(first_filled(obj.get("target"), obj.get("goal"), obj.get("objective"), obj.get("name")))
    achievement = ensure_string(
        first_filled(obj.get("achievement"), obj.get("success"), obj.get("outcome"), obj.get("result"))
    )
    if not target and not achievement:
        return None
    return CharacterGoal(target=target, achievement=achievement)


def _character(entry: Any) -> Optional[StoryArcCharacter]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    role = ensure_string(first_filled(obj.get("role"), obj.get("function")))
    raw_motivation = obj.get("motivation")
    motivation = ensure_object(raw_motivation)
    purpose = first_filled(motivation.get("purpose"), obj.get("motivation_purpose"), obj.get("purpose"))
    if purpose is None and isinstance(raw_motivation, str):
        purpose = raw_motivation
    reason = first_filled(motivation.get("reason"), obj.get("motivation_reason"), obj.get("reason"))
    goals = ensure_array(first_filled(obj.get("goals"), obj.get("objectives"), obj.get("targets")), _goal)
    barriers = ensure_object(obj.get("barriers"))

    if not name and not role and not goals:
        return None
    return StoryArcCharacter(
        name=name or "Unnamed Character",
        role=role,
        description=ensure_string(obj.get("description")),
        motivation=CharacterMotivation(purpose=ensure_string(purpose), reason=ensure_string(reason)),
        goals=goals,
        known_barriers=ensure_string_array(first_filled(
            obj.get("known_barriers"), barriers.get("known"), obj.get("barriers_known"), obj.get("obstacles"),
        )),
        unknown_barriers=ensure_string_array(first_filled(
            obj.get("unknown_barriers"), barriers.get("unknown"), obj.get("barriers_unknown"), obj.get("risks"),
        )),
        arc=ensure_string(obj.get("arc")),
        first_appearance=ensure_string(obj.get("first_appearance")),
    )


def _acts(value: Any) -> Tuple[List[StoryArcAct], List[str]]:
    legacy: List[str] = []

    def _one(entry: Any) -> Optional[StoryArcAct]:
        if isinstance(entry, str):
            text = entry.strip()
            if not text:
                return None
            legacy.append(text)
            return StoryArcAct(name=text)
        obj = ensure_object(entry)
        name = ensure_string(obj.get("name"))
        summary = ensure_string(first_filled(obj.get("summary"), obj.get("description")))
        if not name and not summary:
            return None
        return StoryArcAct(
            name=name or "Unnamed Act",
            summary=summary,
            key_events=ensure_string_array(obj.get("key_events")),
            locations=ensure_string_array(obj.get("locations")),
            climax=ensure_string(obj.get("climax")),
            transition=ensure_string(obj.get("transition")),
        )

    return ensure_array(value, _one), legacy


def _beats(value: Any) -> Tuple[List[StoryArcBeat], List[str]]:
    legacy: List[str] = []

    def _one(entry: Any) -> Optional[StoryArcBeat]:
        if isinstance(entry, str):
            text = entry.strip()
            if not text:
                return None
            legacy.append(text)
            return StoryArcBeat(name=text)
        obj = ensure_object(entry)
        name = ensure_string(obj.get("name"))
        if not name:
            return None
        return StoryArcBeat(
            name=name,
            description=ensure_string(obj.get("description")),
            act=ensure_string(obj.get("act")),
            type=ensure_string(obj.get("type")) or "plot",
            required=obj.get("required") is not False,
        )

    return ensure_array(value, _one), legacy


def _faction(entry: Any) -> Optional[StoryArcFaction]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return StoryArcFaction(
        name=name,
        description=ensure_string(obj.get("description")),
        goals=ensure_string_array(obj.get("goals")),
        resources=ensure_string_array(obj.get("resources")),
        relationship_to_party=ensure_string(obj.get("relationship_to_party")),
    )


def _branch_option(entry: Any) -> Optional[BranchOption]:
    obj = ensure_object(entry)
    choice = ensure_string(obj.get("choice"))
    if not choice:
        return None
    return BranchOption(choice=choice, consequence=ensure_string(obj.get("consequence")))


def _branching_path(entry: Any) -> Optional[BranchingPath]:
    obj = ensure_object(entry)
    decision_point = ensure_string(obj.get("decision_point"))
    if not decision_point:
        return None
    return BranchingPath(decision_point=decision_point, options=ensure_array(obj.get("options"), _branch_option))


def _secret(entry: Any) -> Optional[StoryArcSecret]:
    if isinstance(entry, str):
        return StoryArcSecret(secret=entry.strip()) if entry.strip() else None
    obj = ensure_object(entry)
    text = ensure_string(first_filled(obj.get("secret"), obj.get("name"), obj.get("description")))
    if not text:
        return None
    return StoryArcSecret(
        secret=text,
        discovery_method=ensure_string(first_filled(obj.get("discovery_method"), obj.get("method"))),
        impact=ensure_string(first_filled(obj.get("impact"), obj.get("consequence"))),
    )


def _reward(entry: Any) -> Optional[StoryArcReward]:
    obj = ensure_object(entry)
    name = ensure_string(obj.get("name"))
    if not name:
        return None
    return StoryArcReward(name=name, type=ensure_string(obj.get("type")), when=ensure_string(obj.get("when")))


def normalize_story_arc(raw: Any) -> StoryArcRecord:
    source = merge_draft(raw)
    arc = sub_object(source, *WRAPPER_KEYS)
    barriers = ensure_object(arc.get("barriers"))

    acts, acts_legacy = _acts(first_filled(arc.get("acts"), source.get("acts")))
    beats, beats_legacy = _beats(first_filled(
        arc.get("beats"), arc.get("milestones"), source.get("milestones"), source.get("beats"),
    ))

    return StoryArcRecord(
        title=ensure_string(first_filled(arc.get("title"), source.get("title"))) or "Untitled Story Arc",
        synopsis=ensure_string(first_filled(
            arc.get("synopsis"), arc.get("summary"), source.get("synopsis"), source.get("summary"),
        )),
        theme=ensure_string(first_filled(arc.get("theme"), source.get("theme"))),
        tone=ensure_string(first_filled(arc.get("tone"), source.get("tone"))),
        setting=ensure_string(first_filled(arc.get("setting"), source.get("setting"))),
        level_range=ensure_string(arc.get("level_range")),
        estimated_sessions=ensure_string(arc.get("estimated_sessions")),
        overarching_goal=ensure_string(first_filled(
            arc.get("overarching_goal"), arc.get("goal"), arc.get("objective"), source.get("goal"), source.get("objective"),
        )),
        hook=ensure_string(first_filled(arc.get("hook"), arc.get("inciting_incident"))),
        acts=acts,
        beats=beats,
        characters=ensure_array(first_filled(arc.get("characters"), source.get("characters")), _character),
        factions=ensure_array(first_filled(arc.get("factions"), source.get("factions")), _faction),
        known_barriers=ensure_string_array(first_filled(
            arc.get("known_barriers"), barriers.get("known"), source.get("known_barriers"),
        )),
        unknown_barriers=ensure_string_array(first_filled(
            arc.get("unknown_barriers"), barriers.get("unknown"), source.get("unknown_barriers"),
        )),
        branching_paths=ensure_array(arc.get("branching_paths"), _branching_path),
        rewards=ensure_array(arc.get("rewards"), _reward),
        clues_and_secrets=ensure_array(first_filled(arc.get("clues_and_secrets"), arc.get("secrets")), _secret),
        dm_notes=ensure_string_array(first_filled(arc.get("dm_notes"), arc.get("gm_notes"), arc.get("notes"))),
        acts_legacy=acts_legacy or ensure_string_array(arc.get("acts_legacy")),
        beats_legacy=beats_legacy or ensure_string_array(arc.get("beats_legacy")),
    )
