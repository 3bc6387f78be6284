"""Tests for shared common modules - models, config, reasoning client."""

import logging
from datetime import date
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from src.common.config import (
    ReasoningSettings,
    Settings,
    get_anthropic_api_key,
    get_openai_api_key,
    get_openai_base_url,
)
from src.common.llm import ReasoningClient, extract_json_object
from src.common.logging import setup_logging
from src.common.models import (
    FaultReportItem,
    NextShiftPlan,
    PlannedTask,
    RolloverAction,
    RolloverAnalysis,
    RolloverDecision,
    RolloverRequest,
    TaskAchievement,
    parse_amount,
)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.shifts.rest_weekday == 4
        assert settings.shifts.regular_shift_minutes == 480
        assert settings.shifts.rest_day_shift_minutes == 720
        assert settings.rollover.tolerance == 5
        assert settings.rollover.fallback_rate_per_hour == 100
        assert settings.reasoning.rollover_max_attempts == 2

    def test_load_from_yaml(self):
        settings = Settings.load()
        assert settings.reasoning.rollover_max_attempts == 2
        assert "max_attempts" not in ReasoningSettings.model_fields
        assert settings.fault_rules_abs_path.name == "fault_rules.yaml"
        assert settings.fault_rules_abs_path.is_absolute()
        assert settings.fault_rules_abs_path.exists()

    def test_invalid_rest_weekday(self):
        with pytest.raises(ValidationError):
            Settings(shifts={"rest_weekday": 7})


class TestApiKeys:
    def test_missing_keys_raise(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_openai_api_key()
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
            get_anthropic_api_key()

    def test_keys_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
        assert get_openai_api_key() == "sk-test"
        assert get_anthropic_api_key() == "sk-ant-test"

    def test_base_url(self, monkeypatch):
        monkeypatch.setenv("OPENAI_BASE_URL", "")
        assert get_openai_base_url() is None
        monkeypatch.setenv("OPENAI_BASE_URL", "https://openrouter.ai/api/v1")
        assert get_openai_base_url() == "https://openrouter.ai/api/v1"


class TestParseAmount:
    @pytest.mark.parametrize("value,expected", [
        (None, 0.0),
        (1158, 1158.0),
        (12.5, 12.5),
        ("1158 kg", 1158.0),
        ("1,250 units", 1250.0),
        ("about 3.5 t", 3.5),
        ("n/a", 0.0),
        ("", 0.0),
    ])
    def test_parse_amount(self, value, expected):
        assert parse_amount(value) == expected


class TestFaultReportItem:
    def test_extraction_keys(self):
        item = FaultReportItem.model_validate(
            {"fault_code": "3", "detected_duration": 100, "quantity": 4}
        )
        assert item.code == "03"
        assert item.reported_minutes == 100
        assert item.quantity == 4

    def test_empty_quantity(self):
        item = FaultReportItem.model_validate({"code": "06", "reported_minutes": 30, "quantity": ""})
        assert item.quantity is None

    @pytest.mark.parametrize("raw,expected", [
        ("4 cylinders", 4),
        ("3", 3),
        (2.0, 2),
        ("n/a", None),
        (None, None),
        (-2, None),
    ])
    def test_quantity_parsing(self, raw, expected):
        item = FaultReportItem.model_validate({"code": "03", "reported_minutes": 120, "quantity": raw})
        assert item.quantity == expected

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            FaultReportItem.model_validate({"code": "01", "reported_minutes": -1})


class TestTaskAchievement:
    def test_difference(self, sample_tasks):
        assert [t.difference for t in sample_tasks] == [-300, 200, 3]

    def test_resolved_rate(self):
        explicit = TaskAchievement(task_id=1, target_amount=800, production_rate_per_hour=150)
        derived = TaskAchievement(task_id=2, target_amount=800)
        neutral = TaskAchievement(task_id=3)
        assert explicit.resolved_rate() == 150
        assert derived.resolved_rate() == 100
        assert neutral.resolved_rate() == 100
        assert neutral.resolved_rate(fallback_rate=40) == 40

    def test_from_record(self):
        task = TaskAchievement.from_record({
            "TaskID": 42,
            "target_description": "Blue plastic",
            "target_amount": "1000",
            "target_unit": "kg",
            "achievement": "800 kg",
            "production_rate": None,
        })
        assert task.task_id == 42
        assert task.product_name == "Blue plastic"
        assert task.target_amount == 1000
        assert task.achieved_amount == 800
        # achieved / 8 h
        assert task.production_rate_per_hour == 100

    def test_from_record_without_output_leaves_rate_unset(self):
        task = TaskAchievement.from_record({"task_id": 7, "target_amount": 400, "achievement": None})
        assert task.achieved_amount == 0
        assert task.production_rate_per_hour is None
        assert task.resolved_rate() == 50


class TestRolloverModels:
    def test_decision_wire_names(self):
        decision = RolloverDecision.model_validate({
            "taskId": "T-7",
            "productName": "Steel film",
            "action": " Balance ",
            "amountToTransfer": 200,
            "timeToTransfer": 1.5,
            "reason": "surplus",
        })
        assert decision.task_id == "T-7"
        assert decision.action == RolloverAction.BALANCE

        dumped = decision.model_dump(mode="json", by_alias=True)
        assert dumped == {
            "taskId": "T-7",
            "productName": "Steel film",
            "action": "balance",
            "amountToTransfer": 200,
            "timeToTransfer": 1.5,
            "reason": "surplus",
        }

    def test_decision_by_field_name(self):
        decision = RolloverDecision(task_id=1, action=RolloverAction.NONE)
        assert decision.amount_to_transfer == 0
        assert decision.time_to_transfer_hours == 0

    @pytest.mark.parametrize("field", ["amountToTransfer", "timeToTransfer"])
    def test_negative_transfer_rejected(self, field):
        data = {"taskId": 1, "action": "rollover", field: -1}
        with pytest.raises(ValidationError):
            RolloverDecision.model_validate(data)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            RolloverDecision.model_validate({"taskId": 1, "action": "carry"})

    def test_analysis_defaults(self):
        analysis = RolloverAnalysis(decisions=[])
        assert analysis.summary == ""
        assert analysis.fallback is False

    def test_request_requires_positive_hours(self, sample_tasks):
        next_shift = NextShiftPlan(name="First Shift", date=date(2025, 1, 24))
        with pytest.raises(ValidationError):
            RolloverRequest(
                shift_name="Third Shift",
                date=date(2025, 1, 23),
                tasks=sample_tasks,
                next_shift=next_shift,
                max_shift_hours=0,
            )

    def test_planned_task_hours_non_negative(self):
        with pytest.raises(ValidationError):
            PlannedTask(task_id=1, target_hours=-2)


class TestExtractJsonObject:
    def test_plain_json(self):
        assert extract_json_object('{"decisions": []}') == {"decisions": []}

    def test_markdown_fence(self):
        text = '```json\n{"summary": "ok", "decisions": [{"taskId": 1}]}\n```'
        assert extract_json_object(text)["summary"] == "ok"

    def test_surrounding_prose(self):
        text = 'Here is my answer: {"summary": "done"} Let me know.'
        assert extract_json_object(text) == {"summary": "done"}

    @pytest.mark.parametrize("text", ["", None, "no json here", "[1, 2, 3]"])
    def test_no_object(self, text):
        with pytest.raises(ValueError):
            extract_json_object(text)

    def test_broken_json(self):
        with pytest.raises(ValueError):
            extract_json_object('{"summary": ')
        with pytest.raises(ValueError):
            extract_json_object('{"summary": oops}')


class TestReasoningClient:
    @pytest.fixture
    def client(self) -> ReasoningClient:
        return ReasoningClient(ReasoningSettings(primary_model="test-primary", fallback_model="test-fallback"))

    def test_complete_primary(self, client):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = '{"decisions": [], "summary": "none"}'
        client._openai_client = MagicMock()
        client._openai_client.chat.completions.create.return_value = response

        data = client.complete_primary("system", "user")

        assert data == {"decisions": [], "summary": "none"}
        kwargs = client._openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-primary"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    def test_complete_fallback(self, client):
        response = MagicMock()
        response.content = [MagicMock(text='Sure.\n{"decisions": []}')]
        client._anthropic_client = MagicMock()
        client._anthropic_client.messages.create.return_value = response

        data = client.complete_fallback("system", "user")

        assert data == {"decisions": []}
        kwargs = client._anthropic_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-fallback"
        assert kwargs["system"] == "system"

    def test_missing_key_raises_on_first_use(self, client, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            client.complete_primary("system", "user")


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        first = setup_logging(module_name="shift_ledger.test")
        second = setup_logging(module_name="shift_ledger.test")
        assert first is second
        tagged = [h for h in logging.getLogger().handlers if getattr(h, "_shift_ledger", False)]
        assert len(tagged) == 1

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("SHIFT_LEDGER_LOG_LEVEL", "debug")
        assert setup_logging(module_name="shift_ledger.env").level == logging.DEBUG
        monkeypatch.setenv("SHIFT_LEDGER_LOG_LEVEL", "chatty")
        assert setup_logging(module_name="shift_ledger.env").level == logging.INFO
        monkeypatch.delenv("SHIFT_LEDGER_LOG_LEVEL")
        setup_logging()
