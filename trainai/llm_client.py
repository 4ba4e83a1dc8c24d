"""
Thin wrapper around the Anthropic Messages API.

Constructed once by the entry point and passed into the pipeline.
"""

import anthropic


class CoachClient:
    """Stateless prompt-in, text-out access to Claude."""

    def __init__(self, api_key, config, model=None, max_tokens=None, timeout=None):
        """
        Args:
            api_key: Anthropic API key
            config: Full configuration dictionary (uses the "claude" section)
            model: Claude model to use (defaults to config value)
            max_tokens: Maximum tokens for response (defaults to config value)
            timeout: Client timeout in seconds (defaults to config value)
        """
        claude_config = config.get("claude", {}) or {}
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout or claude_config.get("timeout", 120),
        )
        self.model = model or claude_config["model"]
        self.max_tokens = max_tokens or claude_config.get("max_tokens", 1600)
        self.temperature = claude_config.get("temperature", 0.4)

    def complete(self, prompt, system=None, max_tokens=None, temperature=None):
        """Send one user message and return the first text block of the reply."""
        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        message = self.client.messages.create(**kwargs)
        for block in message.content:
            if getattr(block, "type", None) == "text":
                return block.text or ""
        raise ValueError("Unexpected response format from Claude: no text block")
