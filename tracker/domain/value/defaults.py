"""Defaults written into every new account."""

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transport",
    "Housing",
    "Utilities",
    "Health",
    "Entertainment",
    "Shopping",
    "Education",
    "Travel",
    "Loan",
    "Other",
)

DEFAULT_CLASSIFICATION_PROMPT = """\
You extract expenses from short natural-language messages and file each one
under the best matching category.

Today is: {userDate}
Available categories: {categoriesList}

Rules:
1. amount is a plain number without currency symbols.
2. Prefer an existing category; suggest a new one only when nothing fits.
3. Write the note in the same language as the message.
4. Resolve relative dates ("today", "yesterday") against {userDate} and
   always answer with YYYY-MM-DD. Use {userDate} when no date is given.
5. Pick the most specific category when several overlap, e.g. a mortgage
   is Housing and groceries are Food.

Reply with a single JSON object:
{"amount": number, "category": "...", "note": "...", "date": "YYYY-MM-DD",
 "is_new_category": true/false}
"""
