# Built-in addition drills, used when data/questions/ has nothing valid.
# "answer" may be omitted; the bank computes it from answer_expr or the prompt.
# strategy_tag is derived from the prompt unless given.

QUESTIONS = [
    # make-10
    {"id": "m10-1", "topic": "make-10", "prompt": "7 + 3", "answer": 10, "type": "addition"},
    {"id": "m10-2", "topic": "make-10", "prompt": "8 + 2", "answer": 10, "type": "addition"},
    {"id": "m10-3", "topic": "make-10", "prompt": "6 + 4", "type": "addition"},
    {"id": "m10-4", "topic": "make-10", "prompt": "8 + 5", "answer": 13, "type": "addition"},
    {"id": "m10-5", "topic": "make-10", "prompt": "9 + 3", "answer": 12, "type": "addition"},
    {"id": "m10-6", "topic": "make-10", "prompt": "7 + 4", "answer": 11, "type": "addition"},
    # doubles
    {"id": "dbl-1", "topic": "doubles", "prompt": "5 + 5", "answer": 10, "type": "addition"},
    {"id": "dbl-2", "topic": "doubles", "prompt": "6 + 6", "answer": 12, "type": "addition"},
    {
        "id": "dbl-3",
        "topic": "doubles",
        "prompt": "What is 7 + 7?",
        "answer_expr": "7 + 7",  # 14
        "type": "addition",
    },
    # near-doubles
    {"id": "nd-1", "topic": "near-doubles", "prompt": "6 + 7", "answer": 13, "type": "addition"},
    {"id": "nd-2", "topic": "near-doubles", "prompt": "5 + 6", "answer": 11, "type": "addition"},
    {"id": "nd-3", "topic": "near-doubles", "prompt": "7 + 8", "answer": 15, "type": "addition"},
    # basic
    {"id": "add-1", "topic": "basic", "prompt": "4 + 2", "answer": 6, "type": "addition"},
    {"id": "add-2", "topic": "basic", "prompt": "5 + 3", "answer": 8, "type": "addition"},
]
