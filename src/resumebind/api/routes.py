"""API routes for resumebind."""

from typing import Any, Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException, Response

from ..bindings import (
    Binding,
    BindingConflictError,
    BindingManager,
    BindingNotFoundError,
    BindingSuggestion,
    ReviewNotFoundError,
    SuggestionNotFoundError,
    SuggestionReview,
    SuggestionStateError,
)
from ..fields import RESUME_SCHEMA, DataField, fields_from_schema
from ..matching import BindingMatcher
from ..placeholders import PlaceholderExtractor

router = APIRouter()

# Global binding manager instance
_binding_manager: Optional[BindingManager] = None


def get_binding_manager() -> BindingManager:
    """Get the global binding manager instance."""
    global _binding_manager
    if _binding_manager is None:
        _binding_manager = BindingManager()
    return _binding_manager


async def get_ready_manager() -> BindingManager:
    """Get the binding manager, initializing storage on first use."""
    manager = get_binding_manager()
    if not manager._initialized:
        await manager.initialize()
    return manager


class ExtractRequest(BaseModel):
    """Request to extract placeholders from template content."""

    content: Optional[str] = None
    sources: Optional[dict[str, Optional[str]]] = None  # e.g. {"html": ..., "css": ...}


class TokenContextRequest(BaseModel):
    """Request for the surrounding context of a token."""

    content: str
    token: str
    window: Optional[int] = None


class MatchRequest(BaseModel):
    """Request to match placeholders against a field catalog."""

    placeholders: list[str]
    fields: Optional[list[DataField]] = None
    resume_schema: Optional[dict[str, Any]] = None
    threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    qualify_paths: Optional[bool] = None
    include_candidates: bool = False


class BindingCreateRequest(BaseModel):
    """Request to create a binding."""

    placeholder: str
    data_field: str = ""
    description: Optional[str] = None


class BindingUpdateRequest(BaseModel):
    """Request to assign a field to a binding."""

    data_field: str
    description: Optional[str] = None


class TemplateContentRequest(BaseModel):
    """Template content for suggestion and reconciliation."""

    content: Optional[str] = None
    delete: bool = False


class AcceptAllRequest(BaseModel):
    """Request to accept all pending suggestions."""

    min_confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


def _binding_dict(binding: Binding) -> dict:
    return {
        "id": binding.id,
        "template_id": binding.template_id,
        "placeholder": binding.placeholder,
        "data_field": binding.data_field,
        "selector": binding.selector,
        "description": binding.description,
        "is_mapped": binding.is_mapped,
        "created_at": binding.created_at.isoformat(),
        "updated_at": binding.updated_at.isoformat() if binding.updated_at else None,
    }


def _suggestion_dict(suggestion: BindingSuggestion) -> dict:
    return {
        "binding_id": suggestion.binding_id,
        "placeholder": suggestion.binding.placeholder,
        "suggested_field": suggestion.suggested_field,
        "confidence": suggestion.confidence,
        "reasoning": suggestion.reasoning,
        "state": suggestion.state.value,
    }


def _review_dict(review: SuggestionReview) -> dict:
    return {
        "review_id": review.review_id,
        "template_id": review.template_id,
        "suggestions": [_suggestion_dict(s) for s in review.suggestions],
        "pending_count": len(review.pending),
    }


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    return {
        "status": "ok",
        "service": "resumebind",
        "config": {
            "match_threshold": settings.match_threshold,
            "qualify_field_paths": settings.qualify_field_paths,
            "high_confidence_threshold": settings.high_confidence_threshold,
        },
    }


# Placeholder endpoints


@router.post("/placeholders/extract")
async def extract_placeholders(request: ExtractRequest):
    """
    Extract placeholder tokens from template content.

    Returns:
    - Distinct placeholders in order of first appearance
    - Per-source and total token counts
    - Parsed placeholder details and validation results
    """
    extractor = PlaceholderExtractor()
    sources = request.sources if request.sources is not None else {"content": request.content}

    report = extractor.extract_from_sources(sources)
    details = []
    errors = []
    warnings = []

    for source_name, text in sources.items():
        details.extend(
            {
                "source": source_name,
                "name": p.name,
                "kind": p.kind.value,
                "syntax": p.syntax,
                "start_pos": p.start_pos,
                "end_pos": p.end_pos,
            }
            for p in extractor.extract_placeholders(text)
        )
        validation = extractor.validate_syntax(text)
        errors.extend(f"{source_name}: {e}" for e in validation.errors)
        warnings.extend(f"{source_name}: {w}" for w in validation.warnings)

    return {
        "placeholders": report.placeholders,
        "counts": {**report.counts, "total": report.total},
        "details": details,
        "validation": {
            "valid": not errors,
            "errors": errors,
            "warnings": warnings,
        },
    }


@router.post("/placeholders/context")
async def token_context(request: TokenContextRequest):
    """Describe the markup surrounding a token."""
    from ..config import settings

    extractor = PlaceholderExtractor()
    window = request.window if request.window is not None else settings.context_window
    context = extractor.analyze_token_context(request.token, request.content, window=window)
    return context.model_dump()


# Field catalog and matching endpoints


@router.get("/fields")
async def list_fields():
    """List the flattened catalog of bindable resume data fields."""
    manager = get_binding_manager()
    return {
        "fields": [entry.model_dump(mode="json") for entry in manager.matcher.catalog],
    }


@router.get("/fields/schema")
async def resume_schema():
    """Return the resume data schema."""
    return RESUME_SCHEMA


@router.post("/match")
async def match_placeholders(request: MatchRequest):
    """
    Match placeholders against a field catalog.

    Uses the given fields or schema, or the default resume schema.
    """
    if request.fields is not None:
        fields = request.fields
    elif request.resume_schema is not None:
        fields = fields_from_schema(request.resume_schema)
    else:
        fields = fields_from_schema(RESUME_SCHEMA)

    matcher = BindingMatcher(
        fields, threshold=request.threshold, qualify_paths=request.qualify_paths
    )
    matches = matcher.process_placeholders(request.placeholders)
    matched = {m.placeholder for m in matches}

    result: dict[str, Any] = {
        "matches": [m.model_dump() for m in matches],
        "unmatched": [p for p in request.placeholders if p not in matched],
    }

    if request.include_candidates:
        from ..config import settings

        result["candidates"] = {
            p: [c.model_dump() for c in matcher.rank(p, limit=settings.suggestion_limit)]
            for p in request.placeholders
        }

    return result


# Template binding endpoints


@router.get("/templates/{template_id}/bindings")
async def list_bindings(template_id: int, mapped: Optional[bool] = None):
    """Get all bindings for a template."""
    manager = await get_ready_manager()
    bindings = await manager.storage.list_bindings(template_id, mapped=mapped)
    return [_binding_dict(b) for b in bindings]


@router.post("/templates/{template_id}/bindings", status_code=201)
async def create_binding(template_id: int, request: BindingCreateRequest):
    """Create a binding for a placeholder."""
    manager = await get_ready_manager()

    try:
        binding = await manager.storage.create_binding(
            Binding(
                template_id=template_id,
                placeholder=request.placeholder,
                data_field=request.data_field,
                description=request.description,
                is_mapped=bool(request.data_field),
            )
        )
    except BindingConflictError as e:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "binding_exists",
                "message": str(e),
                "binding": _binding_dict(e.binding),
            },
        )

    return _binding_dict(binding)


@router.patch("/templates/{template_id}/bindings/{binding_id}")
async def update_binding(template_id: int, binding_id: int, request: BindingUpdateRequest):
    """Assign a data field to a binding."""
    manager = await get_ready_manager()

    try:
        binding = await manager.assign(
            template_id, binding_id, request.data_field, description=request.description
        )
    except BindingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _binding_dict(binding)


@router.delete("/templates/{template_id}/bindings/{binding_id}", status_code=204)
async def delete_binding(template_id: int, binding_id: int):
    """Delete a binding."""
    manager = await get_ready_manager()

    try:
        await manager.get_template_binding(template_id, binding_id)
    except BindingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    await manager.storage.delete_binding(binding_id)
    return Response(status_code=204)


@router.delete("/templates/{template_id}/bindings")
async def delete_all_bindings(template_id: int):
    """Delete all bindings for a template."""
    manager = await get_ready_manager()
    count = await manager.storage.delete_all_bindings(template_id)
    return {"status": "ok", "deleted": count}


@router.post("/templates/{template_id}/suggest-bindings")
async def suggest_bindings(template_id: int, request: TemplateContentRequest):
    """
    Discover placeholders and propose fields for unmapped bindings.

    Returns a review session; accept or dismiss its suggestions through the
    /reviews endpoints.
    """
    manager = await get_ready_manager()
    review = await manager.suggest(template_id, request.content)
    return _review_dict(review)


@router.post("/templates/{template_id}/reconcile")
async def reconcile_bindings(template_id: int, request: TemplateContentRequest):
    """List (and optionally delete) bindings whose placeholder left the template."""
    manager = await get_ready_manager()
    stale = await manager.reconcile(template_id, request.content, delete=request.delete)
    return {
        "stale": [_binding_dict(b) for b in stale],
        "deleted": len(stale) if request.delete else 0,
    }


# Review endpoints


def _get_review(manager: BindingManager, review_id: str) -> SuggestionReview:
    try:
        return manager.get_review(review_id)
    except ReviewNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/reviews/{review_id}")
async def get_review(review_id: str):
    """Get a review session and the state of its suggestions."""
    manager = await get_ready_manager()
    return _review_dict(_get_review(manager, review_id))


@router.post("/reviews/{review_id}/accept/{binding_id}")
async def accept_suggestion(review_id: str, binding_id: int):
    """Accept one suggestion, mapping its binding."""
    manager = await get_ready_manager()
    review = _get_review(manager, review_id)

    try:
        binding = await review.accept(binding_id)
    except (SuggestionNotFoundError, BindingNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SuggestionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _binding_dict(binding)


@router.post("/reviews/{review_id}/accept-all")
async def accept_all_suggestions(review_id: str, request: Optional[AcceptAllRequest] = None):
    """Accept every pending suggestion, optionally above a confidence."""
    manager = await get_ready_manager()
    review = _get_review(manager, review_id)
    min_confidence = request.min_confidence if request else None

    try:
        bindings = await review.accept_all(min_confidence=min_confidence)
    except BindingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "accepted": [_binding_dict(b) for b in bindings],
        "pending_count": len(review.pending),
    }


@router.post("/reviews/{review_id}/dismiss/{binding_id}")
async def dismiss_suggestion(review_id: str, binding_id: int):
    """Dismiss one suggestion, leaving its binding unmapped."""
    manager = await get_ready_manager()
    review = _get_review(manager, review_id)

    try:
        suggestion = review.dismiss(binding_id)
    except SuggestionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SuggestionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _suggestion_dict(suggestion)
