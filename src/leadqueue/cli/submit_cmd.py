"""Submit command: send one form, queueing it if the device is offline."""
import json
import sys

import click

from leadqueue.client.submit import SubmissionProgress, SubmitOptions
from leadqueue.core.constants import SUBMIT_DEFAULT_RETRY_COUNT, SUBMIT_DEFAULT_RETRY_DELAY_MS
from leadqueue.core.receipt import StopRule
from leadqueue.core.schemas import validate_payload

from .output import error_box, print_warning, progress_bar, queued_label, success_box


def _parse_fields(fields: tuple[str, ...]) -> dict:
    payload = {}
    for item in fields:
        if "=" not in item:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--field")
        key, value = item.split("=", 1)
        payload[key.strip()] = value
    return payload


def _show_progress(progress: SubmissionProgress):
    bar = progress_bar(progress.progress / 100)
    line = f"[{bar}] {progress.status:<10} attempt {progress.current_attempt}/{progress.max_attempts}"
    if progress.status == "retrying" and progress.error:
        line += f"  ({progress.error})"
    click.echo(line)


@click.command()
@click.argument('form_type')
@click.option('--field', '-f', 'fields', multiple=True, help='Form field as KEY=VALUE (repeatable)')
@click.option('--json', 'json_file', type=click.File('r'), help='Read payload from a JSON file (- for stdin)')
@click.option('--retry-count', default=SUBMIT_DEFAULT_RETRY_COUNT, show_default=True,
              type=click.IntRange(min=1), help='Delivery attempts before giving up')
@click.option('--retry-delay', 'retry_delay_ms', default=SUBMIT_DEFAULT_RETRY_DELAY_MS, show_default=True,
              type=click.IntRange(min=0), help='Milliseconds between attempts')
@click.option('--backoff', 'backoff_factor', default=1.0, show_default=True,
              type=click.FloatRange(min=1.0), help='Delay multiplier per attempt (1.0 = fixed)')
@click.option('--no-validate', is_flag=True, help='Skip required-field checks')
@click.option('--quiet', '-q', is_flag=True, help='Hide progress lines')
@click.pass_context
def submit(ctx, form_type, fields, json_file, retry_count, retry_delay_ms, backoff_factor, no_validate, quiet):
    """Submit a FORM_TYPE form (free-class, assessment, contact, appointment, ...)."""
    client = ctx.obj["client"]

    payload = {}
    if json_file:
        try:
            payload = json.load(json_file)
        except json.JSONDecodeError as e:
            error_box("Submit: FAILED", f"Invalid JSON: {e}")
            sys.exit(2)
        if not isinstance(payload, dict):
            error_box("Submit: FAILED", "Payload JSON must be an object")
            sys.exit(2)
    payload.update(_parse_fields(fields))

    if not no_validate:
        errors = validate_payload(form_type, payload)
        if errors:
            error_box("Submit: INVALID", "; ".join(errors.values()))
            sys.exit(2)

    options = SubmitOptions(
        retry_count=retry_count,
        retry_delay_ms=retry_delay_ms,
        backoff_factor=backoff_factor,
        track_progress=not quiet,
    )

    try:
        result = client.submit(form_type, payload, options, on_progress=_show_progress)
    except StopRule as e:
        error_box("Submit: NOT SAVED", str(e))
        sys.exit(3)

    if result.success:
        success_box("Submit: SENT", [
            ("Form", form_type),
            ("Attempts", str(result.attempts)),
        ])
        return

    if result.queued:
        print_warning("You are offline. Your form was saved and will be sent automatically.")
        success_box("Submit: QUEUED", [
            ("Form", form_type),
            ("Submission", result.data["submission_id"]),
            ("Queue", queued_label(client.queue.size())),
        ], "leadq offline drain")
        return

    error_box("Submit: FAILED", result.error or "unknown error", f"leadq submit {form_type} ...")
    sys.exit(1)
