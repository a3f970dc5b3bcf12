"""Effective (actual key, version, label) for a prompt request.

Precedence: explicit call arguments, then the configured entry, then the
remote service's own default (applied by the client). A version always
suppresses a label at the same level or below.

    configured | caller version | caller label | version        | label
    -----------+----------------+--------------+----------------+------------------------------
    no         | v              | any          | v              | -
    no         | -              | l            | -              | l
    yes        | v              | any          | v              | -
    yes        | -              | non-blank l  | -              | l
    yes        | -              | blank        | config.version | config.label if no config.version
"""

from promptrelay.prompts.models import PromptIdentity, ResolvedPromptConfiguration


def resolve_identity(
    logical_key: str,
    configuration: ResolvedPromptConfiguration | None,
    version: int | None = None,
    label: str | None = None,
) -> PromptIdentity:
    """Compute the identity to request from the remote service.

    Args:
        logical_key: Key the caller asked for
        configuration: Registry record for the key, None if not configured
        version: Caller-supplied version
        label: Caller-supplied label

    Returns:
        PromptIdentity with at most one of version/label set
    """
    if configuration is None:
        return PromptIdentity(
            actual_key=logical_key,
            version=version,
            label=None if version is not None else label,
        )

    if version is not None:
        effective_version, effective_label = version, None
    elif label and label.strip():
        # An explicit label also overrides a configured default version
        effective_version, effective_label = None, label
    else:
        effective_version = configuration.version
        effective_label = configuration.label if effective_version is None else None

    return PromptIdentity(
        actual_key=configuration.actual_key,
        version=effective_version,
        label=effective_label,
    )
