"""Whitespace tokenizer shared by generation and haiku detection."""


def tokenize(text: str) -> list[str]:
    """Split text on runs of whitespace. Leading/trailing whitespace yields no empty tokens."""
    return text.split()


def detokenize(tokens: list[str]) -> str:
    return " ".join(tokens)
