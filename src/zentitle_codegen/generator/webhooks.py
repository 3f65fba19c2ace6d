"""Builds the trigger node's webhook event files from x-webhooks."""

import logging
from pathlib import Path

from zentitle_codegen import downloader
from zentitle_codegen.config import DEFAULT_COMPONENT
from zentitle_codegen.errors import ArtifactValidationError
from zentitle_codegen.generator.engine import TemplateEngine
from zentitle_codegen.generator.files import write_artifact
from zentitle_codegen.generator.validator import validate_files
from zentitle_codegen.parser.base import WebhookEvent
from zentitle_codegen.versions import VersionTracker

logger = logging.getLogger(__name__)

WEBHOOKS_DIR = Path("webhooks")


def extract_webhook_events(spec: dict, excluded: list[str] | None = None) -> list[WebhookEvent]:
    """Collect the POST webhooks declared under x-webhooks, sorted by event code."""
    webhooks = spec.get("x-webhooks") if isinstance(spec, dict) else None
    if not isinstance(webhooks, dict):
        return []

    skip = set(excluded or [])
    events = []
    for event_code, definition in webhooks.items():
        post = definition.get("post") if isinstance(definition, dict) else None
        if not isinstance(post, dict) or event_code in skip:
            continue
        events.append(
            WebhookEvent(
                event_code=event_code,
                name=format_event_name(event_code),
                description=post.get("description")
                or post.get("summary")
                or f"Triggered when {event_code} event occurs",
                payload_schema=_payload_ref(post),
            )
        )
    return sorted(events, key=lambda e: e.event_code)


def format_event_name(event_code: str) -> str:
    """'customer.created' -> 'Customer Created'."""
    return " ".join(part[:1].upper() + part[1:] for part in event_code.split("."))


def _payload_ref(post: dict) -> str | None:
    body = post.get("requestBody")
    content = body.get("content") if isinstance(body, dict) else None
    media = content.get("application/json") if isinstance(content, dict) else None
    schema = media.get("schema") if isinstance(media, dict) else None
    if isinstance(schema, dict):
        return schema.get("$ref")
    return None


class WebhookEventGenerator:
    """Generates webhooks/events.ts and webhooks/types.ts for a trigger node."""

    def __init__(
        self,
        output_dir: Path,
        openapi_url: str | None = None,
        version_tracker: VersionTracker | None = None,
        component_name: str = f"{DEFAULT_COMPONENT}Trigger",
        excluded_events: list[str] | None = None,
        engine: TemplateEngine | None = None,
        timeout: float | None = None,
    ):
        self.output_dir = Path(output_dir)
        self.openapi_url = openapi_url
        self.version_tracker = version_tracker or VersionTracker()
        self.component_name = component_name
        self.excluded_events = excluded_events or []
        self.engine = engine or TemplateEngine()
        self.timeout = timeout

    def generate(self) -> list[WebhookEvent]:
        logger.info("Generating webhook events from OpenAPI spec...")
        document = downloader.load_spec(self.openapi_url, timeout=self.timeout)

        try:
            events = extract_webhook_events(document.spec, self.excluded_events)
            logger.info("Found %d webhook events", len(events))

            rendered = {
                WEBHOOKS_DIR / "events.ts": self.engine.render("webhook-events.ts.j2", events=events),
                WEBHOOKS_DIR / "types.ts": self.engine.render("webhook-types.ts.j2", events=events),
            }
            errors = validate_files({p.as_posix(): c for p, c in rendered.items()})
            if errors:
                raise ArtifactValidationError(errors)
            for relative, content in rendered.items():
                write_artifact(self.output_dir / relative, content)
                logger.info("  Generated webhook file: %s", relative.as_posix())

            self.version_tracker.update_component_version(
                self.component_name,
                document.source,
                document.version,
                {"generatedBy": "webhook-generator", "webhookEventCount": len(events)},
            )
            logger.info("Webhook events generation completed!")
        finally:
            downloader.cleanup(document.temp_file_path)

        return events
