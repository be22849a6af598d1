from __future__ import annotations

import json
from typing import TYPE_CHECKING

from metaevo.adapters.document import (
    load_change_batch,
    load_metamodel,
    load_resolutions,
    render_report,
    save_metamodel,
)
from metaevo.domain.evolution import EvolutionSession
from metaevo.domain.model import UNBOUNDED
from tests.helpers.metamodels import change

if TYPE_CHECKING:
    from pathlib import Path

    from metaevo.domain.model import MetaPackage


def test_saved_metamodel_loads_back(people_package: MetaPackage, tmp_path: Path) -> None:
    path = tmp_path / "nested" / "people.json"

    save_metamodel(people_package, path)
    loaded = load_metamodel(path)

    assert loaded.name == "people"
    assert loaded.ns_uri == "http://example.org/people"
    assert [c.name for c in loaded.classes] == ["Named", "Person", "Company", "Address"]
    assert loaded.get_class("Named").abstract is True
    employees = loaded.get_class("Company").get_reference("employees")
    assert employees.containment is True
    assert employees.upper_bound == UNBOUNDED
    assert employees.target is loaded.get_class("Person")


def test_load_change_batch_converts_detail_keys(tmp_path: Path) -> None:
    path = tmp_path / "changes.json"
    path.write_text(
        json.dumps(
            {
                "changes": [
                    {
                        "changeType": "add",
                        "elementKind": "reference",
                        "details": {
                            "sourceClassName": "Person",
                            "targetClassName": "Address",
                            "name": "home",
                            "lowerBound": 0,
                        },
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    (descriptor,) = load_change_batch(path)

    assert descriptor.details == {
        "source_class_name": "Person",
        "target_class_name": "Address",
        "name": "home",
        "lower_bound": 0,
    }


def test_load_resolutions_converts_resolution_keys(tmp_path: Path) -> None:
    path = tmp_path / "resolutions.json"
    path.write_text(
        json.dumps([{"changeIndex": 0, "resolution": {"className": "Person"}}]),
        encoding="utf-8",
    )

    (entry,) = load_resolutions(path)

    assert entry.change_index == 0
    assert entry.resolution == {"class_name": "Person"}


def test_render_report_uses_camel_case(session: EvolutionSession) -> None:
    operation = session.interpret(change("remove", "class", name="Ghost"))

    rendered = json.loads(render_report(session.report()))

    assert rendered["totalOperations"] == 1
    assert rendered["ambiguousCount"] == 1
    (summary,) = rendered["operations"]
    assert summary["operationId"] == str(operation.operation_id)
    assert summary["state"] == "ambiguous"
    assert summary["ambiguityReason"] == "Class Ghost does not exist"
    assert summary["failureDetail"] is None
