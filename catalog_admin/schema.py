from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


ReviewKind = Literal["products", "countries"]
ReviewStatus = Literal["OPEN", "SAVED"]
TaskStatus = Literal["RUNNING", "COMPLETED"]


class ProductCandidateView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    category: str = ""
    ingredients: str = ""
    functions: str = ""
    target_countries: str = ""
    required_documents: str = ""
    description: str = ""
    selected: bool = True


class CountryCandidateView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    code: str = ""
    requirements: str = ""
    documents: str = ""
    selected: bool = True


class ParseTextRequest(BaseModel):
    text: str = ""


class ParseProductsResponse(BaseModel):
    total: int
    items: list[ProductCandidateView] = Field(default_factory=list)
    hint: Optional[str] = None


class ParseCountriesResponse(BaseModel):
    total: int
    items: list[CountryCandidateView] = Field(default_factory=list)
    hint: Optional[str] = None


class CreateReviewRequest(BaseModel):
    kind: ReviewKind
    text: str = ""


class ReviewView(BaseModel):
    review_id: str
    kind: ReviewKind
    status: ReviewStatus
    created_at: datetime
    updated_at: datetime
    total: int
    selected: int
    items: list[Union[ProductCandidateView, CountryCandidateView]] = Field(default_factory=list)
    hint: Optional[str] = None


class UpdateReviewItemRequest(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    ingredients: Optional[str] = None
    functions: Optional[str] = None
    target_countries: Optional[str] = None
    required_documents: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    requirements: Optional[str] = None
    documents: Optional[str] = None
    selected: Optional[bool] = None


class CreateTaskResponse(BaseModel):
    task_id: str
    collection: str
    status: TaskStatus
    queued: int


class TaskProgress(BaseModel):
    task_id: str
    collection: str
    review_id: Optional[str]
    status: TaskStatus
    created_at: datetime
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    counts: dict[str, int] = Field(default_factory=dict)
    saved: int = 0
    failed: int = 0
    summary: str = ""


class ProductForm(BaseModel):
    name: str = ""
    category: str = ""
    ingredients: str = ""
    functions: str = ""
    target_countries: str = ""
    required_documents: str = ""
    description: str = ""


class CountryForm(BaseModel):
    name: str = ""
    code: str = ""
    requirements: str = ""
    documents: str = ""


class ProductView(BaseModel):
    id: str
    name: str
    category: str
    ingredients: list[str] = Field(default_factory=list)
    functions: list[str] = Field(default_factory=list)
    target_countries: list[str] = Field(default_factory=list)
    required_documents: list[str] = Field(default_factory=list)
    description: str = ""
    created_at: datetime
    updated_at: datetime


class CountryView(BaseModel):
    id: str
    name: str
    code: str
    requirements: str = ""
    documents: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ListProductsResponse(BaseModel):
    total: int
    items: list[ProductView]


class ListCountriesResponse(BaseModel):
    total: int
    items: list[CountryView]


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)


class BulkDeleteResponse(BaseModel):
    deleted: int
    failed: list[str] = Field(default_factory=list)


class CountrySelectRequest(BaseModel):
    value: str = ""
    toggle: Optional[str] = None
    toggle_all: bool = False


class CountrySelectResponse(BaseModel):
    value: str
    selected_codes: list[str] = Field(default_factory=list)
    all_selected: bool
    label: str
