"""
Tests for application model synthesis: entity, screen, workflow and
navigation derivation, the naming/inference heuristics behind them, and the
synthesizer's persistence contract.
"""

from unittest.mock import MagicMock

import pytest

from models.app_model import EntityProperty, Screen
from models.event import Event
from models.pattern import RecognizedPattern
from recognition.definitions import default_definitions
from recognition.engine import PatternRecognitionEngine
from recognition.errors import NoPatternsForSession, PersistenceFailure
from store import DefinitionStore, EventStore, ModelStore, PatternStore
from synthesis.entities import derive_entities, ensure_standard_properties, infer_entity_name
from synthesis.inference import infer_property_type, infer_screen_type, infer_step_type
from synthesis.naming import base_path, entity_name_from_path, to_camel_case, to_display_name
from synthesis.navigation import derive_navigation
from synthesis.synthesizer import ApplicationModelSynthesizer, mean_confidence
from synthesis.workflows import UNNAMED_WORKFLOW, derive_workflows

SESSION = "session_synth"


def _pattern(pid: str, type: str, start: int, confidence: float = 0.8, session_id: str = SESSION,
             **metadata) -> RecognizedPattern:
    return RecognizedPattern(
        id=pid,
        session_id=session_id,
        type=type,
        confidence=confidence,
        start_time=start,
        end_time=start + 500,
        event_ids=[f"{pid}_e0"],
        metadata=metadata,
    )


def _orders_patterns() -> list[RecognizedPattern]:
    return [
        _pattern("p1", "list_view", 1000, confidence=0.8, path="/orders"),
        _pattern("p2", "crud_create", 2000, confidence=0.9, path="/orders/new",
                 fields=["customerName", "totalAmount"], entityName="order"),
        _pattern("p3", "crud_read", 3000, confidence=0.7, path="/orders/5"),
    ]


def _screen(path: str, name: str = "") -> Screen:
    return Screen(id=path, name=name or path, path=path, type="custom")


# ── End-to-end model for the orders session ──────────────────────────────


class TestOrdersModel:
    def setup_method(self):
        self.patterns = PatternStore()
        self.patterns.save_all(_orders_patterns())
        self.models = ModelStore()
        self.synth = ApplicationModelSynthesizer(self.patterns, self.models, version="1.0.0")
        self.model = self.synth.synthesize(SESSION)

    def test_single_entity_with_ordered_operations(self):
        assert len(self.model.entities) == 1
        entity = self.model.entities[0]
        assert entity.name == "order"
        assert entity.display_name == "Order"
        assert entity.operations == ["list", "create", "read"]

    def test_entity_properties(self):
        props = [(p.name, p.type) for p in self.model.entities[0].properties]
        assert props == [
            ("id", "string"),
            ("customerName", "string"),
            ("totalAmount", "currency"),
            ("createdAt", "datetime"),
            ("updatedAt", "datetime"),
        ]

    def test_one_list_screen_for_the_base_path(self):
        assert len(self.model.screens) == 1
        screen = self.model.screens[0]
        assert screen.path == "/orders"
        assert screen.name == "Orders"
        assert screen.type == "list"
        assert screen.entity == "order"
        assert screen.actions == ["list_view", "crud_create", "crud_read"]

    def test_screen_components_union(self):
        components = {c.type: c for c in self.model.screens[0].components}
        assert list(components) == ["DataTable", "Form"]
        assert components["DataTable"].props == {"sortable": False, "filterable": False}
        assert components["Form"].props == {"fields": ["customerName", "totalAmount"]}

    def test_navigation_is_flat_tabs(self):
        nav = self.model.navigation
        assert nav.type == "tabs"
        assert len(nav.items) == 1
        item = nav.items[0]
        assert (item.label, item.path, item.icon) == ("Orders", "/orders", "ShoppingCart")
        assert item.children is None

    def test_confidence_and_metadata(self):
        assert self.model.confidence == pytest.approx(0.8)
        assert self.model.version == "1.0.0"
        assert self.model.metadata["sessionId"] == SESSION
        assert self.model.metadata["patternCount"] == 3
        assert self.model.metadata["patternTypes"] == ["list_view", "crud_create", "crud_read"]
        assert self.model.description == "Generated from 3 patterns"
        assert self.model.name.startswith("App_")

    def test_persisted_once_with_pattern_ids(self):
        assert self.models.get(self.model.id) == self.model
        assert self.models.pattern_ids_for(self.model.id) == ["p1", "p2", "p3"]

    def test_explicit_name_and_description(self):
        model = self.synth.synthesize(SESSION, name="Orders App", description="Back office")
        assert model.name == "Orders App"
        assert model.description == "Back office"


class TestSynthesizerFailures:
    def test_no_patterns_raises_and_persists_nothing(self):
        sink = MagicMock()
        synth = ApplicationModelSynthesizer(PatternStore(), sink)
        with pytest.raises(NoPatternsForSession) as exc_info:
            synth.synthesize("never_analyzed")
        assert "run analysis first" in str(exc_info.value)
        sink.save.assert_not_called()

    def test_sink_failure_surfaces(self):
        patterns = PatternStore()
        patterns.save_all(_orders_patterns())
        sink = MagicMock()
        sink.save.side_effect = IOError("disk full")
        synth = ApplicationModelSynthesizer(patterns, sink)
        with pytest.raises(PersistenceFailure):
            synth.synthesize(SESSION)

    def test_foreign_session_patterns_ignored(self, caplog):
        pattern_store = MagicMock()
        pattern_store.list_by_session.return_value = _orders_patterns() + [
            _pattern("px", "crud_delete", 500, session_id="other", entityName="invoice"),
        ]
        synth = ApplicationModelSynthesizer(pattern_store, ModelStore())
        model = synth.synthesize(SESSION)
        assert [e.name for e in model.entities] == ["order"]
        assert model.metadata["patternCount"] == 3
        assert "not owned by session" in caplog.text


# ── Derivation passes ────────────────────────────────────────────────────


class TestEntities:
    def test_name_prefers_metadata(self):
        p = _pattern("p", "crud_update", 0, entityName="menuItem", path="/orders/3/edit")
        assert infer_entity_name(p) == "menuItem"

    def test_name_from_path_skips_verbs_and_ids(self):
        assert entity_name_from_path("/orders/3/edit") == "order"
        assert entity_name_from_path("/categories/new") == "category"
        assert entity_name_from_path("/") is None

    def test_patterns_without_name_are_skipped(self):
        assert derive_entities([_pattern("p", "sort", 0)]) == []

    def test_standard_properties_idempotent(self):
        props = [
            EntityProperty(name="title", type="string"),
            EntityProperty(name="id", type="string", required=False),
            EntityProperty(name="createdAt", type="datetime", required=True),
            EntityProperty(name="title", type="string"),
        ]
        once = ensure_standard_properties(props)
        twice = ensure_standard_properties(once)
        assert [p.name for p in once] == ["id", "title", "createdAt", "updatedAt"]
        assert once[0].required is True, "id is always required"
        assert twice == once

    def test_observed_standard_fields_are_normalized(self):
        entities = derive_entities([
            _pattern("a", "crud_create", 0, entityName="order",
                     fields=["id", "createdAt", "updatedAt", "note"]),
        ])
        props = entities[0].properties
        assert [p.name for p in props] == ["id", "note", "createdAt", "updatedAt"]
        assert [(p.type, p.required) for p in props if p.name != "note"] == [
            ("string", True),
            ("datetime", True),
            ("datetime", True),
        ]

    def test_malformed_fields_metadata_is_ignored(self):
        entities = derive_entities([
            _pattern("a", "crud_create", 0, entityName="order", fields="title"),
            _pattern("b", "crud_update", 10, entityName="order", fields=[["x"], {"y": 1}, "", "note"]),
        ])
        assert [p.name for p in entities[0].properties] == ["id", "note", "createdAt", "updatedAt"]

    def test_fields_merge_across_patterns(self):
        entities = derive_entities([
            _pattern("a", "crud_create", 0, entityName="order", fields=["note", "email"]),
            _pattern("b", "crud_update", 10, entityName="order", fields=["email", "isPaid"]),
        ])
        props = {p.name: p.type for p in entities[0].properties}
        assert list(props) == ["id", "note", "email", "isPaid", "createdAt", "updatedAt"]
        assert props["email"] == "email"
        assert props["isPaid"] == "boolean"
        assert entities[0].operations == ["create", "update"]


class TestInference:
    @pytest.mark.parametrize("field_name,expected", [
        ("contactEmail", "email"),
        ("phoneNumber", "phone"),
        ("dueDate", "datetime"),
        ("unitPrice", "currency"),
        ("quantity", "number"),
        ("isActive", "boolean"),
        ("description", "text"),
        ("websiteUrl", "url"),
        ("avatar", "image"),
        ("title", "string"),
    ])
    def test_property_types(self, field_name, expected):
        assert infer_property_type(field_name) == expected

    @pytest.mark.parametrize("pattern_type,path,expected", [
        ("list_view", "/orders", "list"),
        ("custom", "/orders/", "list"),
        ("crud_create", "/orders", "form"),
        ("custom", "/orders/new", "form"),
        ("crud_update", "/orders/3", "form"),
        ("crud_read", "/orders", "detail"),
        ("custom", "/orders/42", "detail"),
        ("custom", "/dashboard", "dashboard"),
        ("sort", "/orders", "custom"),
    ])
    def test_screen_types(self, pattern_type, path, expected):
        assert infer_screen_type(pattern_type, path) == expected

    def test_step_types(self):
        assert infer_step_type({"formId": "f1"}) == "form"
        assert infer_step_type({"condition": "total > 100"}) == "decision"
        assert infer_step_type({"navigate": "/checkout"}) == "navigation"
        assert infer_step_type({"name": "confirm"}) == "action"
        assert infer_step_type("confirm") == "action"

    def test_naming(self):
        assert to_camel_case("Menu Item") == "menuItem"
        assert to_display_name("menu_item") == "Menu Item"
        assert to_display_name("menuItem") == "Menu Item"
        assert base_path("/orders/5") == "/orders"
        assert base_path("/orders") == "/orders"


class TestWorkflows:
    def test_mapping_and_scalar_steps(self):
        workflows = derive_workflows([
            _pattern("w", "workflow_step", 0, workflowName="Checkout",
                     steps=[{"name": "Cart", "path": "/cart"}, "pay", {"fields": ["card"]}]),
        ])
        assert len(workflows) == 1
        wf = workflows[0]
        assert wf.name == "Checkout"
        assert wf.triggers == ["manual"]
        assert [(s.name, s.type) for s in wf.steps] == [
            ("Cart", "navigation"),
            ("pay", "action"),
            ("Step 3", "form"),
        ]
        assert wf.steps[1].config == {"value": "pay"}

    def test_unnamed_workflow_without_steps(self):
        wf = derive_workflows([_pattern("w", "workflow_step", 0)])[0]
        assert wf.name == UNNAMED_WORKFLOW
        assert wf.steps == []

    def test_non_workflow_patterns_ignored(self):
        assert derive_workflows(_orders_patterns()) == []

    @pytest.mark.parametrize("workflow_name", [42, ["checkout"], {"name": "checkout"}, ""])
    def test_non_string_name_falls_back(self, workflow_name):
        wf = derive_workflows([_pattern("w", "workflow_step", 0, workflowName=workflow_name)])[0]
        assert wf.name == UNNAMED_WORKFLOW

    def test_non_list_steps_are_ignored(self):
        wf = derive_workflows([_pattern("w", "workflow_step", 0, steps={"name": "pay"})])[0]
        assert wf.steps == []

    def test_synthesize_survives_malformed_workflow_metadata(self):
        patterns = PatternStore()
        patterns.save_all([
            _pattern("w", "workflow_step", 0, workflowName=42, steps="pay", fields={"a": 1}),
        ])
        model = ApplicationModelSynthesizer(patterns, ModelStore()).synthesize(SESSION)
        assert [w.name for w in model.workflows] == [UNNAMED_WORKFLOW]


class TestNavigation:
    def test_groups_share_a_parent(self):
        nav = derive_navigation([
            _screen("/orders", "Orders"),
            _screen("/orders/archive", "Orders - Archive"),
            _screen("/menu", "Menu"),
        ])
        assert [i.label for i in nav.items] == ["Orders", "Menu"]
        parent = nav.items[0]
        assert parent.path == "/orders"
        assert [c.path for c in parent.children] == ["/orders", "/orders/archive"]
        assert nav.items[1].icon == "Menu"

    def test_sidebar_above_five_items(self):
        paths = ["/orders", "/menu", "/staff", "/tables", "/reports", "/settings"]
        assert derive_navigation([_screen(p) for p in paths]).type == "sidebar"
        assert derive_navigation([_screen(p) for p in paths[:5]]).type == "tabs"

    def test_unknown_segment_gets_default_icon(self):
        nav = derive_navigation([_screen("/widgets")])
        assert nav.items[0].icon == "Circle"


def test_mean_confidence():
    assert mean_confidence(_orders_patterns()) == pytest.approx(0.8)


# ── Engine to synthesizer ────────────────────────────────────────────────


def test_analysis_feeds_synthesis():
    events = EventStore()
    for idx, (type, ts, data) in enumerate([
        ("navigation", 0, {"to": "/items/new"}),
        ("form", 1000, {"formAction": "start"}),
        ("form", 2000, {"formAction": "field_change", "fieldName": "title"}),
        ("form", 3000, {"formAction": "submit"}),
        ("state_change", 4000, {"changeType": "set"}),
    ]):
        events.append(Event(id=f"e{idx}", session_id=SESSION, type=type, timestamp=ts, data=data))

    patterns = PatternStore()
    engine = PatternRecognitionEngine(events, DefinitionStore(default_definitions()), patterns)
    assert len(engine.analyze_session(SESSION)) == 1

    model = ApplicationModelSynthesizer(patterns, ModelStore()).synthesize(SESSION)
    assert [e.name for e in model.entities] == ["item"]
    assert [p.name for p in model.entities[0].properties] == ["id", "title", "createdAt", "updatedAt"]
    screen = model.screens[0]
    assert (screen.path, screen.type) == ("/items", "form")
    assert screen.components[0].props == {"fields": ["title"]}
    assert model.confidence == pytest.approx(0.9)
