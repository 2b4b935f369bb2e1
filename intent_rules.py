"""
intent_rules.py
---------------
Declarative rule tables used by intent_engine.py.

INTENT_RULES
    Ordered list of (intent, [rule, ...]).  Table order IS the priority order:
    the first intent with a firing rule wins.  Platform intents (github,
    leetcode, linkedin, blogs) sit above the education / background intents
    because the broad "background|profile" wording would otherwise swallow
    "show me his github profile".

    A rule is either a regex string or a (regex, exclude_regex) pair.  The
    exclusion belongs to that one rule only: the rule fires when the regex
    matches and the exclusion does not.

    Patterns may contain the tokens {owner} (profile owner's first name) and
    {bot} (assistant name); they are filled in by compile_rules().

WEIGHTED_KEYWORDS
    intent -> trigger substrings for the weighted scorer.

PLATFORM_OVERRIDES
    Ordered (intent, regex) pairs tried when a message says "profile".

INAPPROPRIATE_SUBTYPES
    Ordered (regex, response_key) pairs evaluated against the raw message.
"""

import re
from typing import NamedTuple, Optional


class Rule(NamedTuple):
    pattern: "re.Pattern"
    exclude: Optional["re.Pattern"] = None

    def fires(self, text: str) -> bool:
        if not self.pattern.search(text):
            return False
        return self.exclude is None or not self.exclude.search(text)


# --------------------------------------------------------------------------- #
#  Intent rule table                                                           #
# --------------------------------------------------------------------------- #

INTENT_RULES: list = [

    # ── Small talk ───────────────────────────────────────────────────────────
    ("greeting", [
        r"^(hi|hello|hey|hola|namaste|greetings|good morning|good evening|sup|yo|wassup)\b",
    ]),

    ("about_bot", [
        r"\b(who|what|tell me about|introduce) (is |are )?{bot}\b",
        r"\bwho (are|r) (you|u)\b",
        r"\bwhat (are|r) (you|u)\b",
        r"\b{bot}\b",
        r"\bhow does this chatbot work",
        r"\bhow (was|is) this (chatbot |bot )?built",
    ]),

    # ── Platforms (must precede the broad background/profile wording) ────────
    ("github", [
        r"\b(github|git hub|repositories|repos?)\b",
        r"\b(show|what|tell) .* (github|code|repositories?)\b",
        r"github(?:\.com| profile| account| username| repo| repos?| stats?)",
    ]),

    ("leetcode", [
        r"\b(leetcode|leet code|coding problems?|dsa|algorithms?)\b",
        r"(?:leetcode|leet code)(?: profile| account| stats?| problems?| username)?",
        r"\bproblems? solved\b",
    ]),

    ("linkedin", [
        r"\blinkedin\b",
        r"\bconnect (on )?linkedin\b",
    ]),

    ("blogs", [
        r"\b(blog|medium|article|writing|post)s?\b",
        r"\b(does he |do you )?write\b",
        r"\blatest (blog|article|post)\b",
    ]),

    # ── Education ────────────────────────────────────────────────────────────
    ("education", [
        r"\b({owner}|{owner}['’]s) (education|educational|qualification(s)?|degree|academic|academic background|stud(y|ies))\b",
        r"\b(what|tell me|share|show|give|describe|say|talk about) .* ({owner}|he|he['’]s|his|you|your) .* "
        r"(education(al)?( qualification(s)?)?|qualification(s)?|degree(s)?|study|studies|college|school|"
        r"academic( background)?|major|course|field|graduation|alma mater)\b",
        r"\b(education|educational background|qualification(s)?|academic background|academic record|"
        r"academic history|stud(y|ies)|college|school|degree(s)?|course|field of study|major|alma mater)\b",
        r"\bwhere (did|do|does|has) (you|he|{owner}) (study|go to (college|school)|graduate|complete (his|your)? (degree|education))\b",
        r"\b(what|which|when) .* (degree|qualification(s)?|education|course|field|major|college|school|university)\b",
        r"\b(tell me|show|share|give|say|talk) (me )?(about )?(his|your|the|{owner}['’]s)? (education|college|school|stud(y|ies)|academic background|qualifications?)\b",
        r"\b(his|your|the)? ?(educational|academic)? ?(background|history|record|profile)\b(?!.*(github|linkedin|leetcode|medium))",
        r"\b(did|have|has|was|were|is|are|what|where|which) .* (graduate|graduation|course|major|field of study|specialization|subject|stream)\b",
        r"\b(highest|current|level of) (education|qualification|degree|study|academic background)\b",
        r"\b(study|degree|education|college|school|graduation|qualification)\?$",
    ]),

    ("college", [
        r"\b{owner}'?s? college\b",
        r"\b(which |what |your |his )?college (did |does )?.*attend\b",
        r"\b(which |what |your |his )?college\b",
        r"\b(which |what |your |his )?university\b",
        r"\bwhere .* graduate\b",
        r"\bengineering college\b",
    ]),

    ("degree", [
        r"\b{owner}'?s? degree\b",
        r"\b(what |which )?degree (does |did)?.*have\b",
        r"\b(what |which )?degree\b",
        r"\bb\.?e\.?\b",
        r"\bbachelor\b",
        r"\bcomputer science (degree|engineering)\b",
    ]),

    ("schooling", [
        r"\b{owner}'?s? school\b",
        r"\b(school|10th|12th|sslc|p\.?u\.?)\b",
        r"\bhigh school\b",
        r"\bsecondary\b",
        r"\bpre.?university\b",
    ]),

    ("cgpa", [
        r"\b{owner}'?s? (cgpa|gpa|marks|score)\b",
        r"\b(what |your |his )?(cgpa|gpa|grade|marks|percentage|score)\b",
        r"\bhow much .* (score|marks)\b",
        r"\bacademic (performance|record)\b",
    ]),

    # ── The person ───────────────────────────────────────────────────────────
    ("about_creator", [
        r"\b(who|what|tell me about|introduce) (is )?{owner}(?! .*(education|qualification|degree|college|school|study))\b",
        r"\babout {owner}(?! .*(education|qualification|degree))\b",
        r"\b{owner} {owner_last}\b",
        r"\bwho (is )?he\b",
        r"\b(your|his) background(?! .*(education|academic))\b",
        r"\b{owner}'?s? (story|journey|bio)\b",
    ]),

    ("tech_stack", [
        r"\b(what |show |tell me )?(are )?(his |your |the )?(technologies?|tech stack)\b",
        r"\bwhat (technologies|tech) (do|does) (you|he|{owner}) (work with|use|know)\b",
        r"\bdo you have experience with (aws|react|python|angular|node)",
        r"\bexperience with (aws|react|python|angular|java|spring)",
    ]),

    ("skills", [
        r"\b(what |show |tell me )?(are )?(his |your |the )?skills?\b",
        r"\bwhat (can|does) (he|{owner}|you) (do|know)\b",
        r"\b(his |your |the )?expertise\b",
        (r"\bprogramming languages?\b", r"\b(learn|start with|begin|first)\b"),
    ]),

    ("projects", [
        r"\b(show|tell|what|list|see) .*(projects?|portfolio|work)\b",
        r"\blatest projects?\b",
        r"\bwhat (did|has) (he|{owner}|you) (built?|created?|made?)\b",
    ]),

    # ── Contact & work ───────────────────────────────────────────────────────
    ("contact", [
        r"\b(contact|email|reach|get in touch|message)\b",
        r"\bhow (to|can i) (contact|reach|message|get in touch)\b",
    ]),

    ("job_seeking", [
        r"\b(looking for|open to|available for|seeking) (job|work|opportunities?)\b",
        r"\b(hiring|hire|job opportunities?)\b",
        r"\bare you (looking|open|available)",
    ]),

    ("resume", [
        r"\b(resume|cv|curriculum vitae)\b",
        r"\bdownload .* resume\b",
    ]),

    ("location", [
        r"\b(location|where .* live|timezone|current location)\b",
        r"\bwhere (are you|is he) (based|located)\b",
    ]),

    ("portfolio_tech", [
        r"\bwhat stack .* (use|used) .* (website|site|portfolio)\b",
        r"\bhow .* (host|deploy) .* portfolio\b",
    ]),

    ("source_code", [
        r"\b(is |the )?source code (public|available|open)\b",
        r"\bcan i see .* (source |)code\b",
    ]),

    ("favorite_frameworks", [
        r"\bfavorite (framework|technology|tech|language)\b",
        r"\bpreferred (framework|stack)\b",
    ]),

    ("collaboration", [
        r"\b(collaborate|work together|partnership|team up)\b",
        r"\bcan i (collaborate|work) with\b",
    ]),

    ("learning_first", [
        r"\bwhich (language|programming language) .* (learn first|start with|begin)\b",
        r"\bfirst (language|programming language)\b",
    ]),

    ("build_portfolio", [
        r"\bhow (can i|to|do i) build .* portfolio\b",
        r"\bcreate .* portfolio\b",
    ]),

    ("resources", [
        r"\b(what |which |any )?resources .* recommend\b",
        r"\brecommend .* (resources|courses|tutorials)\b",
        r"\bwhere .* learn\b",
    ]),

    ("mentoring", [
        r"\bdo you (mentor|teach)\b",
        r"\bmentorship\b",
        r"\bcan you (help|guide|teach) me\b",
    ]),

    ("freelance", [
        r"\b(freelance|hire|services)\b",
        r"\bdo you take .* (freelance|projects?)\b",
        r"\bavailable for (work|hire)\b",
    ]),

    ("experience", [
        r"\bhow many years .* experience\b",
        r"\byears of experience\b",
        r"\bexperience with .* (web|ai|automation|apps?)\b",
    ]),

    ("pricing", [
        r"\b(hourly rate|pricing|rates?|cost|how much)\b",
        r"\bwhat .* (charge|cost)\b",
    ]),

    ("why_developer", [
        r"\bwhy .* (become|became) .* developer\b",
        r"\bwhy (programming|coding|development)\b",
    ]),

    ("learning_journey", [
        r"\bhow did you (start|begin|learn) .* (programming|coding)\b",
        r"\blearning journey\b",
        r"\bhow .* become .* developer\b",
    ]),

    ("open_source", [
        r"\bopen source (contribution|repos?|projects?)\b",
        r"\bcontribute to .* repos?\b",
    ]),

    ("personal_info", [
        r"\b(age|gender|pronouns?)\b",
        r"\bhow old\b",
        r"\bwhat'?s .* age\b",
    ]),

    # ── Requests we refuse ───────────────────────────────────────────────────
    ("inappropriate", [
        r"\bhack .* for me\b",
        r"\bdo .* homework\b",
        r"\b(date|marry|girlfriend|boyfriend)\b",
        r"\bapi key\b",
        r"\bpassword\b",
        r"\bbank (details|account)\b",
    ]),
]

DEFAULT_INTENT = "default"

# Intents whose rules were written against the raw message (apostrophes,
# possessives) and are therefore also tried on the untouched input.
RAW_TEXT_INTENTS = frozenset({
    "education", "college", "degree", "schooling", "cgpa",
    "about_creator", "personal_info",
})


# --------------------------------------------------------------------------- #
#  Weighted keywords / overrides / sub-responses                              #
# --------------------------------------------------------------------------- #

DISAMBIGUATOR = "profile"

# Table order breaks score ties.
WEIGHTED_KEYWORDS: dict = {
    "github":    ["github", "repo", "repository", "code", "stars"],
    "linkedin":  ["linkedin", "connect", "professional", "profile"],
    "education": ["education", "college", "degree", "qualification", "profile"],
}

# Score bonus when DISAMBIGUATOR and the intent's own name co-occur
DISAMBIGUATOR_BONUS = 1

# Below this the scorer abstains and the pattern matcher decides
MIN_KEYWORD_SCORE = 2

PLATFORM_OVERRIDES: list = [
    ("github",   r"github|git hub"),
    ("leetcode", r"leetcode|leet ?code"),
    ("linkedin", r"linkedin"),
    ("blogs",    r"medium|blog"),
]

# Evaluated against the raw (un-normalised) message; first match wins.
INAPPROPRIATE_SUBTYPES: list = [
    (r"hack",             "inappropriate_hacking"),
    (r"homework",         "homework"),
    (r"date|marry",        "dating"),
    (r"api|password|bank", "api_keys"),
]


# --------------------------------------------------------------------------- #
#  Compilation                                                                 #
# --------------------------------------------------------------------------- #

def _fill(pattern: str, tokens: dict) -> str:
    for name, value in tokens.items():
        pattern = pattern.replace("{" + name + "}", value)
    return pattern


def compile_rules(owner: str = "owner", bot: str = "bot", owner_last: str = "") -> list:
    """
    Build the runnable rule table.

    Parameters
    ----------
    owner      : str – profile owner's first name
    bot        : str – assistant's name
    owner_last : str – owner's last name (optional)

    Returns
    -------
    list[tuple[str, list[Rule]]] in priority order.
    """
    tokens = {
        "owner":      re.escape(owner.strip().lower()) or "owner",
        "bot":        re.escape(bot.strip().lower()) or "bot",
        # an empty last name must never match
        "owner_last": re.escape(owner_last.strip().lower()) or r"(?!)",
    }

    compiled = []
    for intent, raw_rules in INTENT_RULES:
        rules = []
        for raw in raw_rules:
            if isinstance(raw, tuple):
                pattern, exclude = raw
            else:
                pattern, exclude = raw, None
            rules.append(Rule(
                pattern=re.compile(_fill(pattern, tokens), re.IGNORECASE),
                exclude=re.compile(_fill(exclude, tokens), re.IGNORECASE) if exclude else None,
            ))
        compiled.append((intent, rules))
    return compiled


def intent_names() -> tuple:
    """All intents the classifier can return, in priority order, plus the default."""
    return tuple(name for name, _ in INTENT_RULES) + (DEFAULT_INTENT,)
