# cvhistory/domain/diff.py
import json
from typing import Any, Dict, List, Optional, TypedDict

from .snapshot import Snapshot

# Compared individually, in this order
DIFF_FIELDS = ("title", "summary", "template_id", "personal_info", "theme")


class Diff(TypedDict):
    fields_changed: List[str]
    sections_added: List[str]
    sections_removed: List[str]
    sections_modified: List[str]


def empty_diff() -> Diff:
    return {
        "fields_changed": [],
        "sections_added": [],
        "sections_removed": [],
        "sections_modified": [],
    }


def initial_diff() -> Diff:
    diff = empty_diff()
    diff["fields_changed"] = ["initial"]
    return diff


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def _sections_by_type(sections: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Index sections by their type.

    Duplicate types are not disambiguated: the first occurrence
    represents the type and later ones are ignored.
    """
    indexed: Dict[str, Dict[str, Any]] = {}
    for section in sections:
        indexed.setdefault(section["type"], section)
    return indexed


def diff_snapshots(previous: Optional[Snapshot], current: Snapshot) -> Diff:
    """
    Structural delta going from `previous` to `current`.

    - Top-level fields are compared by canonical JSON form
    - Sections are matched by type, never by list position
    - No previous snapshot yields the synthetic "initial" diff
    """
    if previous is None:
        return initial_diff()

    old = previous.to_dict()
    new = current.to_dict()
    diff = empty_diff()

    for field in DIFF_FIELDS:
        if _canonical(old.get(field)) != _canonical(new.get(field)):
            diff["fields_changed"].append(field)

    old_sections = _sections_by_type(old.get("sections") or [])
    new_sections = _sections_by_type(new.get("sections") or [])

    for section_type, section in new_sections.items():
        if section_type not in old_sections:
            diff["sections_added"].append(section_type)
        elif _canonical(old_sections[section_type]) != _canonical(section):
            diff["sections_modified"].append(section_type)

    for section_type in old_sections:
        if section_type not in new_sections:
            diff["sections_removed"].append(section_type)

    return diff
