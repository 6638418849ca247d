from dataclasses import dataclass, field
from typing import Dict, Optional

from stylesnap.schemas.tryon import DEFAULT_MODEL, ModelId, ValidationResult

VALIDATE = "validate"
GENERATE = "generate"


@dataclass
class TryOnSession:
    """Per-page try-on state.

    Every validate/generate request takes a ticket; a completion is applied
    only if its ticket is still the latest one issued for that kind.
    """

    user_image: Optional[str] = None
    validation: Optional[ValidationResult] = None
    generated_image: Optional[str] = None
    selected_model: ModelId = DEFAULT_MODEL
    error: Optional[str] = None
    _issued: Dict[str, int] = field(default_factory=lambda: {VALIDATE: 0, GENERATE: 0}, init=False, repr=False)
    _pending: Dict[str, Optional[int]] = field(
        default_factory=lambda: {VALIDATE: None, GENERATE: None}, init=False, repr=False
    )
    _seq: int = field(default=0, init=False, repr=False)

    @property
    def is_validating(self) -> bool:
        return self._pending[VALIDATE] is not None

    @property
    def is_generating(self) -> bool:
        return self._pending[GENERATE] is not None

    @property
    def is_valid(self) -> bool:
        return bool(self.validation and self.validation.isValid)

    @property
    def can_validate(self) -> bool:
        return bool(self.user_image) and not self.is_validating

    @property
    def can_select_model(self) -> bool:
        return bool(self.user_image) and self.is_valid and not self.is_generating

    @property
    def can_generate(self) -> bool:
        return self.can_select_model

    def set_user_image(self, data_uri: str) -> None:
        self.user_image = data_uri or None
        self.validation = None
        self.generated_image = None
        self.error = None
        # results for the previous photo are stale now
        self._invalidate(VALIDATE)
        self._invalidate(GENERATE)

    def select_model(self, model: ModelId) -> None:
        self.selected_model = ModelId(model)

    def begin(self, kind: str) -> int:
        self._seq += 1
        self._issued[kind] = self._seq
        self._pending[kind] = self._seq
        if kind == VALIDATE:
            self.validation = None
        else:
            self.generated_image = None
        self.error = None
        return self._seq

    def is_current(self, kind: str, ticket: int) -> bool:
        return self._issued[kind] == ticket

    def finish_validation(self, ticket: int, result: ValidationResult) -> bool:
        if not self._finish(VALIDATE, ticket):
            return False
        self.validation = result
        return True

    def finish_generation(self, ticket: int, image: str) -> bool:
        if not self._finish(GENERATE, ticket):
            return False
        self.generated_image = image
        self.error = None
        return True

    def fail_generation(self, ticket: int, message: str) -> bool:
        if not self._finish(GENERATE, ticket):
            return False
        self.generated_image = None
        self.error = message
        return True

    def _finish(self, kind: str, ticket: int) -> bool:
        if not self.is_current(kind, ticket):
            return False
        self._pending[kind] = None
        return True

    def _invalidate(self, kind: str) -> None:
        self._seq += 1
        self._issued[kind] = self._seq
        self._pending[kind] = None
