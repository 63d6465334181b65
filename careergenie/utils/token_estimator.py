def estimate_tokens(text: str) -> int:
    """Rough token count for log rows: ~1.3 tokens per word, never below chars/4."""
    if not text or not text.strip():
        return 0
    words = len(text.split())
    by_chars = len(text) // 4
    return max(int(words * 1.3), by_chars, 1)
