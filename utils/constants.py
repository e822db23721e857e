"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages per persona and language
- Keyword groups recognised in direct messages
- Slash-command replies

(Prevents hardcoding across the codebase)

Templates use named placeholders; every language of a persona must define
the same keys with the same placeholders (checked at startup).
"""

# ============================================================
# LANGUAGES
# ============================================================

LANG_PL = "pl"
LANG_EN = "en"

# ============================================================
# KEYWORDS (matched on lowercased text without diacritics)
# ============================================================

KEYWORD_LANGUAGE_SWITCH = "language_switch"
KEYWORD_HELP = "help"
KEYWORD_WITHDRAW = "withdraw"
KEYWORD_STATUS = "status"

# Evaluation order of keyword groups
KEYWORD_PRECEDENCE = (
    KEYWORD_LANGUAGE_SWITCH,
    KEYWORD_HELP,
    KEYWORD_WITHDRAW,
    KEYWORD_STATUS,
)

DEFAULT_KEYWORDS = {
    KEYWORD_LANGUAGE_SWITCH: ("english", "po polsku", "polski", "language", "jezyk"),
    KEYWORD_HELP: ("pomoc", "pomoze", "help"),
    KEYWORD_WITHDRAW: ("wypisz", "usun moje dane", "withdraw", "delete my data"),
    KEYWORD_STATUS: ("status", "postep", "progress"),
}

# ============================================================
# DIRECT MESSAGE REPLIES: KRETES (task1)
# ============================================================

KRETES_MESSAGES = {
    LANG_PL: {
        "help": (
            "Cześć! Jestem Kretes :mole: Ktoś podkopał serwerownię i ślady prowadzą do {required} osób z naszego Slacka. "
            "Wyślij mi ich wzmianki w jednej wiadomości, np. `@ktos @ktos_inny`.\n"
            "Komendy: `status`, `english`, `wypisz`."
        ),
        "language_switched": "Od teraz rozmawiamy po polsku :flag-pl:",
        "withdrawn": "Usunąłem wszystkie Twoje dane. Jeśli wrócisz, zaczniesz od nowa. Do zobaczenia!",
        "status_not_started": "Jeszcze nie próbowałeś. Napisz `pomoc`, żeby dowiedzieć się, o co chodzi.",
        "status_in_progress": "Liczba prób: {attempts}. Dotychczas wskazani: {guesses}.",
        "status_completed": "Zagadka rozwiązana w {attempts} próbach. Brawo!",
        "too_few": "Za mało osób. Szukamy dokładnie {required}.",
        "too_many": "Za dużo osób! Szukamy dokładnie {required}, nie zgaduj hurtem.",
        "partial": "Niestety, to nie ten zestaw. Próba nr {attempts}, szukaj dalej!",
        "solved": "Brawo! Złapałeś podkopywaczy w {attempts} próbach :tada:",
        "already_completed": "Ta zagadka jest już przez Ciebie rozwiązana :sunglasses:",
        "not_understood": "Nie rozumiem. Napisz `pomoc`, jeśli się zgubiłeś.",
    },
    LANG_EN: {
        "help": (
            "Hi! I'm Kretes :mole: Someone dug under the server room and the tracks lead to {required} people on our Slack. "
            "Send me their mentions in one message, e.g. `@someone @someone_else`.\n"
            "Commands: `status`, `polski`, `withdraw`."
        ),
        "language_switched": "From now on we talk in English :flag-gb:",
        "withdrawn": "All your data has been deleted. If you come back, you start from scratch. Bye!",
        "status_not_started": "You have not tried yet. Type `help` to learn what this is about.",
        "status_in_progress": "Attempts: {attempts}. Mentioned so far: {guesses}.",
        "status_completed": "Riddle solved in {attempts} attempts. Well done!",
        "too_few": "Not enough people. We are looking for exactly {required}.",
        "too_many": "Too many people! We are looking for exactly {required}, no shotgun guessing.",
        "partial": "Sorry, that is not the right set. Attempt #{attempts}, keep looking!",
        "solved": "Well done! You caught the diggers in {attempts} attempts :tada:",
        "already_completed": "You have already solved this riddle :sunglasses:",
        "not_understood": "I don't understand. Type `help` if you are lost.",
    },
}

# ============================================================
# DIRECT MESSAGE REPLIES: REXOR (task2)
# ============================================================

REXOR_MESSAGES = {
    LANG_PL: {
        "help": (
            "Wysyłaj mi wzmianki osób, które HaCKerMaN ukrył w różnych miejscach! Jest ich {required} :smile:\n"
            "Komendy: `status`, `english`, `wypisz`."
        ),
        "language_switched": "Przełączono na język polski.",
        "withdrawn": "Twoje dane zostały usunięte. Do zobaczenia!",
        "status_not_started": "Nie wysłałeś jeszcze żadnych odpowiedzi. Możesz zawsze zapytać mnie o `pomoc`.",
        "status_in_progress": "Próby: {attempts}. Wskazane osoby: {guesses}.",
        "status_completed": "Hackerman pokonany w {attempts} próbach!",
        "too_few": "Brakuje osób. HaCKerMaN ukrył dokładnie {required}.",
        "too_many": "Za dużo! HaCKerMaN ukrył dokładnie {required}.",
        "partial": "Niestety to nam nie pomoże (próba {attempts}). Szukaj w różnych miejscach!",
        "solved": "Brawo! Znalazłeś wszystkich w {attempts} próbach. Hackerman pokonany!",
        "already_completed": "Już pokonałeś Hackermana, odpocznij :smile:",
        "not_understood": "Niestety to nam nie pomoże. Możesz zawsze zapytać się mnie o `pomoc`.",
    },
    LANG_EN: {
        "help": (
            "Send me mentions of the people HaCKerMaN hid in various places! There are {required} of them :smile:\n"
            "Commands: `status`, `polski`, `withdraw`."
        ),
        "language_switched": "Switched to English.",
        "withdrawn": "Your data has been deleted. See you!",
        "status_not_started": "You have not sent any answers yet. You can always ask me for `help`.",
        "status_in_progress": "Attempts: {attempts}. People mentioned: {guesses}.",
        "status_completed": "Hackerman defeated in {attempts} attempts!",
        "too_few": "Someone is missing. HaCKerMaN hid exactly {required}.",
        "too_many": "Too many! HaCKerMaN hid exactly {required}.",
        "partial": "Sorry, that won't help us (attempt {attempts}). Look in different places!",
        "solved": "Well done! You found everyone in {attempts} attempts. Hackerman defeated!",
        "already_completed": "You already beat Hackerman, take a rest :smile:",
        "not_understood": "Sorry, that won't help us. You can always ask me for `help`.",
    },
}

# ============================================================
# SLASH COMMAND REPLIES
# ============================================================

COMMAND_MESSAGES = {
    LANG_PL: {
        "not_authorized": "Nie masz uprawnień do tej komendy.",
        "text_required": "Podaj treść wiadomości, np. `/kretes <link do wątku> treść`.",
    },
    LANG_EN: {
        "not_authorized": "You are not authorized to use this command.",
        "text_required": "Message text is required, e.g. `/kretes <thread link> text`.",
    },
}

NO_GUESSES_PLACEHOLDER = "-"
