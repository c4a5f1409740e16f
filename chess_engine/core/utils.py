def format_search_info(result) -> str:
    """Status line shown after an engine move, e.g. '1,234 nodes searched in 0.051 seconds'."""
    return f"{result.nodes_visited:,} nodes searched in {result.elapsed:.3f} seconds"


def format_score(score: int) -> str:
    """Centipawns as pawns with an explicit sign, White positive."""
    return f"{score / 100:+.2f}"
