import random
from typing import Dict, Iterable, List, Optional

from flask import current_app

from .errors import EmptyQuestionBank


def build_playlist(questions: Iterable[dict], categories: Iterable[dict],
                   rng: Optional[random.Random] = None) -> List[dict]:
    """Build the fixed question order for one game.

    Questions are grouped by category; the category order and the order
    inside each category are shuffled independently, so every category is
    played as one contiguous run. Entries are value copies carrying their
    category's name and options, so later edits to the bank never reach an
    in-progress game. Questions whose category no longer exists are skipped.
    """
    rng = rng or random.Random()
    categories_by_id = {c['id']: c for c in categories}

    grouped: Dict[str, List[dict]] = {}
    for q in questions:
        if q['category_id'] not in categories_by_id:
            current_app.logger.info(f"[playlist-skip] question={q.get('id')} missing category={q['category_id']}")
            continue
        grouped.setdefault(q['category_id'], []).append(q)

    if not grouped:
        raise EmptyQuestionBank()

    category_ids = list(grouped)
    rng.shuffle(category_ids)

    playlist = []
    for category_id in category_ids:
        category = categories_by_id[category_id]
        members = list(grouped[category_id])
        rng.shuffle(members)
        for q in members:
            playlist.append({
                'id': q['id'],
                'term': q['term'],
                'correct_answer': q['correct_answer'],
                'category_id': category_id,
                'category_name': category['name'],
                'option1': category['option1'],
                'option2': category['option2'],
            })
    return playlist
