from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


class EntityProperty(BaseModel):
    name: str
    type: str               # "string" | "email" | "datetime" | "currency" | ...
    required: bool = False
    default_value: Optional[Any] = None


class EntityRelationship(BaseModel):
    type: Literal["one-to-one", "one-to-many", "many-to-many"]
    target_entity: str
    foreign_key: Optional[str] = None


class Entity(BaseModel):
    id: str
    name: str               # camelCase identifier
    display_name: str
    properties: list[EntityProperty] = Field(default_factory=list)
    relationships: list[EntityRelationship] = Field(default_factory=list)
    operations: list[str] = Field(default_factory=list)    # de-duplicated CRUD tags


class UIComponent(BaseModel):
    id: str
    type: str               # "DataTable" | "Form" | "FilterPanel" | "SearchInput"
    props: dict[str, Any] = Field(default_factory=dict)
    children: Optional[list["UIComponent"]] = None


class Screen(BaseModel):
    id: str
    name: str
    path: str
    type: Literal["list", "detail", "form", "dashboard", "custom"]
    components: list[UIComponent] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)       # de-duplicated pattern types
    entity: Optional[str] = None


class WorkflowStep(BaseModel):
    id: str
    name: str
    type: Literal["form", "action", "decision", "navigation"]
    config: dict[str, Any] = Field(default_factory=dict)


class Workflow(BaseModel):
    id: str
    name: str
    steps: list[WorkflowStep] = Field(default_factory=list)
    triggers: list[str] = Field(default_factory=lambda: ["manual"])


class NavigationItem(BaseModel):
    label: str
    path: str
    icon: Optional[str] = None
    children: Optional[list["NavigationItem"]] = None


class NavigationStructure(BaseModel):
    type: Literal["sidebar", "tabs"]
    items: list[NavigationItem] = Field(default_factory=list)


class ApplicationModel(BaseModel):
    id: str
    version: str
    name: str
    description: str
    entities: list[Entity]
    screens: list[Screen]
    workflows: list[Workflow]
    navigation: NavigationStructure
    confidence: float       # mean of the contributing pattern confidences
    metadata: dict[str, Any] = Field(default_factory=dict)
