"""
HTML builders shared by the test suite.
"""

PROSE = (
    "The river runs quietly past the old mill, where the miller once ground wheat for the whole valley, "
    "and the children still gather on summer evenings to watch the water turn the wheel."
)

PROSE_WORDS = len(PROSE.split())


def prose(paragraphs: int) -> str:
    """``paragraphs`` paragraphs of plain prose."""
    return "".join(f"<p>{PROSE}</p>" for _ in range(paragraphs))


def page(body: str, title: str = "Test", head: str = "") -> str:
    """Wrap ``body`` in a minimal HTML document."""
    return f"<!DOCTYPE html><html><head><title>{title}</title>{head}</head><body>{body}</body></html>"
