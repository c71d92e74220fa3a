"""CLI commands for policy management.

- policy validate: Validate policy syntax and values
"""

import json
from pathlib import Path
from typing import Any

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.policy import PolicyValidationError, load_policy


@click.group("policy")
def policy_group() -> None:
    """Manage policy files.

    Examples:

        # Validate a policy
        tplan policy validate my-policy.yaml
    """
    pass


@policy_group.command("validate")
@click.argument("policy_file", type=click.Path(exists=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human).",
)
def validate_policy_cmd(policy_file: Path, output_format: str) -> None:
    """Validate a policy YAML file.

    Checks that the policy file has valid YAML syntax, a supported schema
    version, and valid evaluator settings.

    Exit codes:
        0: Policy is valid
        10: Policy validation failed

    Examples:

        # Validate with JSON output (for CI/tooling)
        tplan policy validate my-policy.yaml --format json
    """
    result = _validate_policy(policy_file)

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        _output_human(result)

    if not result["valid"]:
        raise SystemExit(ExitCode.POLICY_VALIDATION_ERROR)


def _validate_policy(policy_path: Path) -> dict[str, Any]:
    """Validate a policy file and return the result as a dict.

    Returns:
        Dict with keys: valid, file, message, evaluators, errors
    """
    result: dict[str, Any] = {
        "valid": False,
        "file": str(policy_path),
        "evaluators": [],
        "errors": [],
    }

    if policy_path.is_dir():
        message = f"Path is a directory, not a file: {policy_path}"
        result["errors"].append(
            {"field": None, "message": message, "code": "is_directory"}
        )
        result["message"] = message
        return result

    try:
        policy = load_policy(policy_path)
    except FileNotFoundError as e:
        result["errors"].append(
            {"field": None, "message": str(e), "code": "file_not_found"}
        )
        result["message"] = str(e)
        return result
    except PolicyValidationError as e:
        code = "validation_error"
        if "Invalid YAML syntax" in e.message:
            code = "yaml_syntax_error"
        result["errors"].append({"field": e.field, "message": e.message, "code": code})
        result["message"] = e.message
        return result
    except PermissionError as e:
        message = f"Permission denied: {e}"
        result["errors"].append(
            {"field": None, "message": message, "code": "permission_denied"}
        )
        result["message"] = message
        return result

    result["valid"] = True
    result["message"] = "Policy is valid"
    result["evaluators"] = [kind.value for kind in policy.evaluators]
    return result


def _output_human(result: dict[str, Any]) -> None:
    """Output validation result in human-readable format."""
    if result["valid"]:
        click.echo(click.style("Valid", fg="green") + f": {result['file']}")
        click.echo(f"  Evaluators: {', '.join(result['evaluators'])}")
    else:
        click.echo(click.style("Invalid", fg="red") + f": {result['file']}")
        if result.get("message"):
            click.echo(f"  {result['message']}")
