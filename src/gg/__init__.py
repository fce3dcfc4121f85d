"""gg - the 2-letter agent-native git client.

gg squeezes verbose registry, GitHub and LLM API payloads into a few labeled
lines so that AI coding agents spend tokens on work instead of JSON. It also
wraps an LLM provider to turn a prompt into a commit and a pull request.
"""

__version__ = "0.9.6"

__all__ = ["__version__"]
