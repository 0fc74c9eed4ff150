"""
Quote workflow: the customer's side of analyze-then-submit.

One QuoteWorkflow object owns everything the order form shows: the chosen
file, its analysis, the selected services and delivery speed, the email,
and the current state. Input events (file chosen, checkbox toggled, submit
clicked, ...) are method calls; the quote itself is always derived from
the current inputs, never stored.

States:
    IDLE ──select_file──▶ ANALYZING ──▶ READY ──submit──▶ SUBMITTING ──▶ SUBMITTED
                              │           ▲                    │
                              ▼           │                    ▼
                       ANALYSIS_FAILED    └──────────── SUBMIT_FAILED
    (select_file again from ANALYSIS_FAILED or READY; reset() from anywhere)

Failures are reported through ``message`` and never retried automatically.
Validation failures that block a request (no file, no service, bad email)
raise before any network call is made.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from core.exceptions import (
    InvalidEmailFormatError,
    InvalidTransitionError,
    MissingOrderDetailsError,
    NoFileSelectedError,
    QuoteOrderError,
)
from logging_config import get_logger
from models.order import AnalysisResult, DeliverySpeed, Service
from modules.i18n import DEFAULT_LANGUAGE, create_translator
from modules.order_client import OrderClient
from modules.pricing import (
    DEFAULT_PRICING,
    PricingTable,
    format_price,
    format_rate,
    price_for,
    rate_label,
    rate_labels as combined_rates,
)

logger = get_logger(__name__)

# local-part@domain.tld, deliberately permissive
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.search(email) is not None


class WorkflowState(Enum):
    """Where the customer is in the analyze-then-submit flow."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    ANALYSIS_FAILED = "analysis_failed"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"


ALLOWED_TRANSITIONS: Dict[WorkflowState, Set[WorkflowState]] = {
    WorkflowState.IDLE: {WorkflowState.ANALYZING},
    WorkflowState.ANALYZING: {WorkflowState.READY, WorkflowState.ANALYSIS_FAILED},
    WorkflowState.ANALYSIS_FAILED: {WorkflowState.ANALYZING},
    WorkflowState.READY: {WorkflowState.ANALYZING, WorkflowState.SUBMITTING},
    WorkflowState.SUBMITTING: {WorkflowState.SUBMITTED, WorkflowState.SUBMIT_FAILED},
    WorkflowState.SUBMIT_FAILED: {WorkflowState.READY},
    WorkflowState.SUBMITTED: set(),
}

# Selections cannot change while an order is in flight or after it went out
_LOCKED_STATES = {WorkflowState.SUBMITTING, WorkflowState.SUBMITTED}


@dataclass(frozen=True)
class SelectedFile:
    name: str
    content: bytes = field(repr=False)


class QuoteWorkflow:
    """
    Controller for one customer's quote and order.

    Args:
        client: Server access (analysis and submission)
        confirm: Asked with the confirmation prompt before submitting;
            must return True for the order to be sent
        pricing: Per-page rates
        language: Language of labels and messages ("en" or "ar")
        confirmation_url: Where the UI goes after a successful submission
    """

    def __init__(
        self,
        client: OrderClient,
        confirm: Callable[[str], bool],
        pricing: PricingTable = DEFAULT_PRICING,
        language: str = DEFAULT_LANGUAGE,
        confirmation_url: str = "success.html",
    ) -> None:
        self.client = client
        self.confirm = confirm
        self.pricing = pricing
        self.language = language
        self.confirmation_url = confirmation_url
        self._ = create_translator(language)

        self.state = WorkflowState.IDLE
        self.file: Optional[SelectedFile] = None
        self.analysis: Optional[AnalysisResult] = None
        self.services: Set[Service] = set()
        self.delivery_speed = DeliverySpeed.NORMAL
        self.email = ""
        self.message: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self.transitions: List[Tuple[WorkflowState, WorkflowState]] = []

    @classmethod
    def from_config(
        cls,
        client: OrderClient,
        confirm: Callable[[str], bool],
        config: Mapping[str, Any],
    ) -> "QuoteWorkflow":
        """
        Build a workflow priced and labelled like the server.

        Uses the app's PRICING_TABLE when present (app.config after
        create_app), otherwise builds one from PRICING.
        """
        pricing = config.get("PRICING_TABLE") or PricingTable.from_config(config["PRICING"])
        return cls(
            client,
            confirm,
            pricing=pricing,
            language=config.get("LANGUAGE", DEFAULT_LANGUAGE),
            confirmation_url=config.get("CONFIRMATION_URL", "success.html"),
        )

    # ------------------------------------------------------------------
    # State bookkeeping
    # ------------------------------------------------------------------

    def _transition(self, target: WorkflowState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state.value, target.value)
        logger.debug(f"Quote workflow: {self.state.value} -> {target.value}")
        self.transitions.append((self.state, target))
        self.state = target

    def _ensure_editable(self) -> None:
        if self.state in _LOCKED_STATES:
            raise InvalidTransitionError(self.state.value, "edit")

    # ------------------------------------------------------------------
    # Derived quote
    # ------------------------------------------------------------------

    @property
    def word_count(self) -> int:
        return self.analysis.word_count if self.analysis else 0

    @property
    def page_count(self) -> int:
        return self.analysis.page_count if self.analysis else 0

    @property
    def price_per_page(self) -> Decimal:
        return rate_label(self.services, self.delivery_speed, self.pricing)

    @property
    def total_price(self) -> Decimal:
        return price_for(self.services, self.delivery_speed, self.page_count, self.pricing)

    @property
    def total_price_display(self) -> str:
        return format_price(self.total_price)

    @property
    def rate_labels(self) -> Dict[DeliverySpeed, str]:
        """Delivery-option labels, e.g. "Normal delivery ($12 per page)"."""
        return {
            speed: self._(f"delivery.{speed.value}", rate=format_rate(rate))
            for speed, rate in combined_rates(self.services, self.pricing).items()
        }

    @property
    def delivery_label(self) -> str:
        return self.rate_labels[self.delivery_speed]

    @property
    def selected_service_labels(self) -> List[str]:
        """Display labels of the ticked services, Rephrasing before Translation."""
        return [self._(f"services.{service.value}") for service in Service.ordered(self.services)]

    @property
    def email_valid(self) -> bool:
        return is_valid_email(self.email)

    @property
    def can_submit(self) -> bool:
        return (
            self.state is WorkflowState.READY
            and self.file is not None
            and bool(self.services)
            and self.page_count > 0
            and self.total_price > 0
            and self.email_valid
        )

    @property
    def status_text(self) -> str:
        """Status line for the form: progress or the last error."""
        if self.state is WorkflowState.ANALYZING:
            return self._("workflow.analyzing")
        if self.state is WorkflowState.SUBMITTING:
            return self._("workflow.submitting")
        if self.message:
            return self._("workflow.error", message=self.message)
        return ""

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def select_file(self, file_name: Optional[str], content: Optional[bytes]) -> WorkflowState:
        """
        A file was chosen: discard the old analysis and selections, analyze.

        Raises:
            NoFileSelectedError: no file given (state unchanged)
            InvalidTransitionError: a request is already in flight or the
                order was already submitted
        """
        if not file_name or content is None:
            self.message = self._("workflow.no_file")
            raise NoFileSelectedError(self.message)

        self._transition(WorkflowState.ANALYZING)
        self.file = SelectedFile(file_name, content)
        self.analysis = None
        self.services.clear()
        self.message = None

        try:
            result = self.client.analyze_document(file_name, content)
        except QuoteOrderError as e:
            self.message = e.message or self._("workflow.analysis_failed")
            logger.warning(f"Analysis of {file_name} failed: {self.message}")
            self._transition(WorkflowState.ANALYSIS_FAILED)
            return self.state

        self.analysis = result
        self._transition(WorkflowState.READY)
        logger.info(f"{file_name}: {result.word_count} words, {result.page_count} pages")
        return self.state

    def toggle_service(self, service: Service, selected: bool) -> None:
        self._ensure_editable()
        if selected:
            self.services.add(service)
        else:
            self.services.discard(service)

    def set_delivery_speed(self, speed: DeliverySpeed) -> None:
        self._ensure_editable()
        self.delivery_speed = speed

    def set_email(self, email: str) -> None:
        self._ensure_editable()
        self.email = (email or "").strip()

    def reset(self) -> None:
        """Start over: back to IDLE with every input cleared."""
        if self.state is not WorkflowState.IDLE:
            self.transitions.append((self.state, WorkflowState.IDLE))
        self.state = WorkflowState.IDLE
        self.file = None
        self.analysis = None
        self.services.clear()
        self.delivery_speed = DeliverySpeed.NORMAL
        self.email = ""
        self.message = None
        self.redirect_to = None

    def submit(self) -> WorkflowState:
        """
        Send the order if every guard passes and the customer confirms.

        Returns:
            SUBMITTED on success; READY when the customer declined or the
            server refused (``message`` holds the reason)

        Raises:
            InvalidTransitionError: not in READY
            NoFileSelectedError, MissingOrderDetailsError,
            InvalidEmailFormatError: order incomplete; nothing was sent
        """
        if self.state is not WorkflowState.READY:
            raise InvalidTransitionError(self.state.value, WorkflowState.SUBMITTING.value)

        if self.file is None:
            self.message = self._("workflow.no_file")
            raise NoFileSelectedError(self.message)
        if not self.services:
            self.message = self._("workflow.no_service")
            raise MissingOrderDetailsError(self.message, missing=["services"])
        if self.page_count <= 0 or self.total_price <= 0:
            self.message = self._("workflow.no_pages")
            raise MissingOrderDetailsError(self.message, missing=["pages"])
        if not self.email_valid:
            self.message = self._("workflow.invalid_email")
            raise InvalidEmailFormatError(self.email, self.message)

        if not self.confirm(self._("workflow.confirm")):
            logger.info("Order submission cancelled by customer")
            return self.state

        services = self.selected_service_labels
        delivery = self.delivery_label
        total = self.total_price_display
        self.message = None
        self._transition(WorkflowState.SUBMITTING)

        try:
            self.client.submit_order(
                self.file.name,
                self.file.content,
                self.email,
                services,
                delivery,
                total,
            )
        except QuoteOrderError as e:
            self.message = e.message or self._("workflow.submit_failed")
            logger.warning(f"Order submission failed: {self.message}")
            self._transition(WorkflowState.SUBMIT_FAILED)
            self._transition(WorkflowState.READY)
            return self.state

        self._transition(WorkflowState.SUBMITTED)
        self.redirect_to = self.confirmation_url
        logger.info(f"Order for {self.file.name} submitted ({total})")
        return self.state
