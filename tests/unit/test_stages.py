"""Unit tests for the interview stage table."""
import pytest
from pydantic import ValidationError

from app.services.interview.stages import (
    DEFAULT_STAGE_PROMPTS,
    FIRST_STAGE,
    InterviewStage,
    StageTable,
)


class TestStageTable:
    """Test stage ordering and lookups."""

    def test_walk_from_intro_reaches_end_in_six_steps(self, stage_table):
        stage = InterviewStage.INTRO
        visited = [stage]
        for _ in range(6):
            stage = stage_table.next_stage(stage).key
            visited.append(stage)

        assert visited == [
            InterviewStage.INTRO,
            InterviewStage.PROBLEM,
            InterviewStage.IMPACT,
            InterviewStage.SOLUTION,
            InterviewStage.CONTACT,
            InterviewStage.CLOSING,
            InterviewStage.END,
        ]

    def test_only_end_is_terminal(self, stage_table):
        assert stage_table.is_terminal(InterviewStage.END) is True
        for stage in InterviewStage:
            if stage != InterviewStage.END:
                assert stage_table.is_terminal(stage) is False

    def test_end_has_no_successor(self, stage_table):
        end = stage_table.definition(InterviewStage.END)
        assert end.successor is None
        assert stage_table.next_stage(InterviewStage.END).key == InterviewStage.END

    def test_lookup_by_string_key(self, stage_table):
        assert stage_table.next_stage("contact").key == InterviewStage.CLOSING
        assert stage_table.prompt_for("impact") == DEFAULT_STAGE_PROMPTS[InterviewStage.IMPACT]

    def test_unknown_stage_defaults_to_first(self, stage_table):
        assert stage_table.definition("bogus").key == FIRST_STAGE
        assert stage_table.prompt_for("bogus") == stage_table.prompt_for(FIRST_STAGE)
        assert stage_table.next_stage("bogus").key == InterviewStage.PROBLEM
        assert stage_table.is_terminal("bogus") is False

    def test_is_known(self):
        assert StageTable.is_known("closing") is True
        assert StageTable.is_known(InterviewStage.END) is True
        assert StageTable.is_known("bogus") is False
        assert StageTable.is_known(None) is False

    def test_every_stage_has_a_prompt(self, stage_table):
        for stage in InterviewStage:
            assert stage_table.prompt_for(stage)

    def test_prompt_overrides(self):
        table = StageTable(prompt_overrides={"problem": "Custom prompt", "unknown": "Ignored"})

        assert table.prompt_for(InterviewStage.PROBLEM) == "Custom prompt"
        assert table.prompt_for(InterviewStage.INTRO) == DEFAULT_STAGE_PROMPTS[InterviewStage.INTRO]

    def test_definitions_are_immutable(self, stage_table):
        definition = stage_table.definition(InterviewStage.INTRO)
        with pytest.raises(ValidationError):
            definition.prompt = "changed"
        assert stage_table.prompt_for(InterviewStage.INTRO) == DEFAULT_STAGE_PROMPTS[InterviewStage.INTRO]
