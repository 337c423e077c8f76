"""
scoring/ - Essay band scoring

Modules:
    utils.py              - Decimal clamp / half-band rounding
    vocabulary.py         - Immutable term lists and whole-word matching
    word_counter.py       - Word counting and the accepted length window
    prompt_builder.py     - Instruction and payload text for the model
    response_parser.py    - Model output -> ParsedScore
    score_validator.py    - Clamp, aggregate, penalties, plausibility gate, tier
    feedback_gate.py      - Feedback quality check and narrative templates
    fallback_scorer.py    - Deterministic heuristic scorer
"""
