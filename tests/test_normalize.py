"""Tests for import normalization of loose board data."""

import logging
from datetime import datetime

from kanbanflow.engine.completion import filter_active
from kanbanflow.models.context import BoardContext
from kanbanflow.transfer.export import export_data
from kanbanflow.transfer.normalize import find_duplicate_ids, normalize


def _loose_board():
    return {
        "settings": {
            "statuses": [
                {"name": "Not Started", "background": "#EF4444"},
                {"name": "In Progress", "color": "#F97316"},
            ],
            "subStatuses": [{"name": "On Tray", "parent": "Not Started"}],
            "importanceLevels": [{"name": "High"}, {"name": "Medium"}, {"name": "Low"}],
            "bidOrigins": [{"name": "ETIMAD"}],
        },
        "tasks": [
            {
                "id": "legacy-1",
                "taskId": "Q-100",
                "title": "Quote pumps",
                "date": "2025-07-01T08:00:00Z",
                "dueDate": "2025-07-20T08:00:00+03:00",
                "status": "In Progress",
                "subStatus": "",
                "importance": "High",
                "bidOrigin": "ETIMAD",
                "description": "Pumps for site B",
            },
            {"taskid": "X-1"},
        ],
    }


class TestNormalizeSettings:

    def test_alternate_field_names(self, now):
        result = normalize(_loose_board(), now=now)
        settings = result.settings
        assert settings.category_names()[:2] == ["Not Started", "In Progress"]
        assert settings.workflow_categories[0].color == "#EF4444"
        assert settings.sub_categories[0].parent_category == "Not Started"
        assert settings.origin_names() == ["ETIMAD"]

    def test_completion_category_synthesized(self, now):
        settings = normalize(_loose_board(), now=now).settings
        done = settings.workflow_categories[-1]
        assert done.name == "Done"
        assert done.color == "#22C55E"

    def test_existing_completion_category_not_duplicated(self, now):
        board = _loose_board()
        board["settings"]["statuses"].append({"name": "DONE"})
        settings = normalize(board, now=now).settings
        assert [name.casefold() for name in settings.category_names()].count("done") == 1

    def test_fresh_taxonomy_ids(self, now):
        board = _loose_board()
        board["settings"]["statuses"][0]["id"] = "keep-me"
        settings = normalize(board, now=now).settings
        assert settings.workflow_categories[0].id != "keep-me"

    def test_missing_settings_yields_completion_only(self, now):
        result = normalize({"tasks": []}, now=now)
        assert result.settings.category_names() == ["Done"]
        assert result.tasks == []

    def test_non_mapping_input(self, now):
        result = normalize(["not", "a", "board"], now=now)
        assert result.tasks == []


class TestCompletionSynonyms:
    """An imported completion column under a synonym is reused, not duplicated."""

    def test_existing_synonym_category_reused(self, now):
        board = {
            "settings": {"statuses": [{"name": "Not Started"}, {"name": "Completed"}]},
            "tasks": [{"title": "Shipped", "status": "Completed", "completionDate": "2025-07-10T09:00:00Z"}],
        }
        result = normalize(board, now=now)
        assert result.settings.category_names() == ["Not Started", "Completed"]

        context = BoardContext.from_settings(result.settings)
        assert context.completion_category == "Completed"
        assert filter_active(result.tasks, context.completion_category) == []

    def test_synonym_status_filed_under_synthesized_category(self, now):
        board = {
            "settings": {"statuses": [{"name": "Not Started"}]},
            "tasks": [{"title": "Shipped", "status": "Completed", "completionDate": "2025-07-10T09:00:00Z"}],
        }
        task = normalize(board, now=now).tasks[0]
        assert task.status == "Done"
        assert task.completion_date == datetime(2025, 7, 10, 9, 0)

    def test_status_case_insensitive_match_to_completion(self, now):
        board = {"settings": {"statuses": ["Todo", "Done"]}, "tasks": [{"title": "T", "status": "DONE"}]}
        assert normalize(board, now=now).tasks[0].status == "Done"


class TestBareNameEntries:

    def test_string_taxonomy_entries_read_as_names(self, now):
        board = {
            "settings": {
                "statuses": ["Not Started", "Done"],
                "importanceLevels": ["High", "Low"],
                "bidOrigins": ["ETIMAD"],
                "subStatuses": ["On Tray", 7],
            },
            "tasks": [{"title": "Quote", "status": "Not Started"}],
        }
        result = normalize(board, now=now)
        assert result.settings.category_names() == ["Not Started", "Done"]
        assert result.settings.importance_names() == ["High", "Low"]
        assert result.settings.origin_names() == ["ETIMAD"]
        assert [sub.name for sub in result.settings.sub_categories] == ["On Tray"]

        task = result.tasks[0]
        assert task.status == "Not Started"
        assert task.importance == "Low"
        assert task.completion_date is None


class TestNormalizeTasks:

    def test_full_record(self, now):
        task = normalize(_loose_board(), now=now).tasks[0]
        assert task.id == "legacy-1"
        assert task.taskid == "Q-100"
        assert task.desc == "Pumps for site B"
        assert task.date == datetime(2025, 7, 1, 8, 0)
        assert task.due_date == datetime(2025, 7, 20, 5, 0)
        assert task.status == "In Progress"
        assert task.completion_date is None

    def test_title_falls_back_to_taskid(self, now):
        task = normalize(_loose_board(), now=now).tasks[1]
        assert task.title == "X-1"
        assert task.id
        assert task.date == now
        assert task.due_date == now

    def test_title_falls_back_to_desc(self, now):
        task = normalize({"tasks": [{"desc": "Call supplier", "taskid": "X-2"}]}, now=now).tasks[0]
        assert task.title == "Call supplier"

    def test_untitled_placeholder(self, now):
        task = normalize({"tasks": [{}]}, now=now).tasks[0]
        assert task.title == "Untitled Task"

    def test_unknown_status_corrected_to_first_category(self, now):
        board = _loose_board()
        board["tasks"][0]["status"] = "Archived"
        assert normalize(board, now=now).tasks[0].status == "Not Started"

    def test_missing_importance_uses_default(self, now):
        task = normalize(_loose_board(), now=now).tasks[1]
        assert task.importance == "Medium"

    def test_unparseable_dates_fall_back_to_now(self, now):
        task = normalize({"tasks": [{"title": "T", "date": "yesterday", "dueDate": "soon"}]}, now=now).tasks[0]
        assert task.date == now
        assert task.due_date == now

    def test_completion_date_preserved(self, now):
        board = {"tasks": [{"title": "T", "status": "Done", "completionDate": "2025-07-02T10:00:00Z"}]}
        task = normalize(board, now=now).tasks[0]
        assert task.completion_date == datetime(2025, 7, 2, 10, 0)

    def test_one_task_per_record(self, now):
        board = {"tasks": [{"title": "a"}, {"title": "b"}, {"title": "c"}]}
        assert len(normalize(board, now=now).tasks) == 3


class TestIdempotence:

    def test_normalizing_an_export_changes_only_taxonomy_ids(self, now):
        first = normalize(_loose_board(), now=now)
        second = normalize(export_data(first.settings, first.tasks), now=now)

        assert second.tasks == first.tasks
        assert second.settings.category_names() == first.settings.category_names()
        assert second.settings.importance_names() == first.settings.importance_names()
        assert second.settings.origin_names() == first.settings.origin_names()
        assert [s.parent_category for s in second.settings.sub_categories] == [
            s.parent_category for s in first.settings.sub_categories
        ]


class TestDuplicateIds:

    def _board(self):
        return {"tasks": [{"id": "same", "title": "a"}, {"id": "same", "title": "b"}, {"id": "other", "title": "c"}]}

    def test_duplicates_preserved_and_logged(self, now, caplog):
        with caplog.at_level(logging.WARNING, logger="kanbanflow.transfer.normalize"):
            result = normalize(self._board(), now=now)
        assert [task.id for task in result.tasks] == ["same", "same", "other"]
        assert "duplicated task id" in caplog.text

    def test_duplicates_reassigned_on_request(self, now):
        result = normalize(self._board(), now=now, reassign_duplicate_ids=True)
        ids = [task.id for task in result.tasks]
        assert ids[0] == "same"
        assert ids[2] == "other"
        assert len(set(ids)) == 3
        assert find_duplicate_ids(result.tasks) == []
