from models.event import Event
from models.session import Session
from models.definition import PatternDefinition, PatternRules, StepRule
from models.pattern import RecognizedPattern, PatternStats, PatternTypeStats
from models.app_model import (
    ApplicationModel, Entity, EntityProperty, EntityRelationship,
    NavigationItem, NavigationStructure, Screen, UIComponent,
    Workflow, WorkflowStep,
)

__all__ = [
    "Event", "Session",
    "PatternDefinition", "PatternRules", "StepRule",
    "RecognizedPattern", "PatternStats", "PatternTypeStats",
    "ApplicationModel", "Entity", "EntityProperty", "EntityRelationship",
    "NavigationItem", "NavigationStructure", "Screen", "UIComponent",
    "Workflow", "WorkflowStep",
]
