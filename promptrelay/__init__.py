"""promptrelay: resolve logical prompt keys to remote or local prompt content.

Prompts live in a remote prompt-management service (Langfuse) under their
own names, versions and labels. promptrelay merges layered local
configuration, decides which version or label to request, fetches it with
retries and falls back to configured local defaults.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
