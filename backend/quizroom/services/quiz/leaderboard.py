from typing import Dict, List


def project_leaderboard(players) -> List[Dict[str, object]]:
    """Sorted view of players by descending score.

    ``sorted`` is stable, so ties keep registry (join) order.
    """
    rows = [p.to_dict() for p in players]
    return sorted(rows, key=lambda row: row['score'], reverse=True)
