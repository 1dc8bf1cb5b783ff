from pathlib import Path

import pytest

from claim_ingest.parsing.exceptions import ClaimParserError
from claim_ingest.parsing.prompt_loader import (
    TASKS,
    load_json_schema,
    load_prompt_template,
    load_tasks,
)


class TestBundledPrompts:
    def test_every_task_loads(self) -> None:
        tasks = load_tasks()
        assert set(tasks) == set(TASKS)

    def test_templates_have_text_placeholder(self) -> None:
        for task in load_tasks().values():
            assert "{text}" in task.template

    def test_classification_has_labels_placeholder(self) -> None:
        assert "{labels}" in load_prompt_template("classification")

    def test_schemas_are_objects(self) -> None:
        for name in TASKS:
            assert load_json_schema(name)["type"] == "object"


class TestMissingFiles:
    def test_missing_template_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ClaimParserError, match="prompt template"):
            load_prompt_template("entities", tmp_path)

    def test_invalid_schema_raises(self, tmp_path: Path) -> None:
        (tmp_path / "entities_schema.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ClaimParserError, match="JSON schema"):
            load_json_schema("entities", tmp_path)

    def test_non_object_schema_raises(self, tmp_path: Path) -> None:
        (tmp_path / "entities_schema.json").write_text("[]", encoding="utf-8")
        with pytest.raises(ClaimParserError, match="must be an object"):
            load_json_schema("entities", tmp_path)
