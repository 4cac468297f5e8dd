SYSTEM_PROMPT = (
    'You are a FOOD-ONLY visual tagger. Output 3-5 edible foods actually visible. '
    'If the picture is not of food, return an empty list. '
    'NEVER output vague terms like: snack, food, meal, dish, appetizer, plate, junk food. '
    'Prefer concrete foods (e.g., spaghetti, penne pasta, orange, steak, broccoli). '
    "Use 'canonical' as a normalized food for kcal lookup "
    '(e.g., spaghetti->pasta, penne->pasta, fries->french fries).'
)

USER_PROMPT = (
    'Return JSON only: items=[{label, confidence, canonical}]. If uncertain, still return best guesses; '
    'if no EDIBLE items are visible, return items:[].'
)

FOOD_LABELS_SCHEMA = {
    'type': 'object',
    'additionalProperties': False,
    'required': ['items'],
    'properties': {
        'items': {
            'type': 'array',
            'minItems': 0,
            'maxItems': 5,
            'items': {
                'type': 'object',
                'additionalProperties': False,
                'required': ['label', 'confidence', 'canonical'],
                'properties': {
                    'label': {'type': 'string'},
                    'confidence': {'type': 'number'},
                    'canonical': {'type': 'string'},
                },
            },
        },
    },
}
