"""
response_engine.py
------------------
Turns a resolved intent (or a fuzzy knowledge-base hit) into the reply text.

Inputs are the intent, the user's original message and a snapshot of the
profile cache (see profile_cache.py).  Apart from picking one of several
authored variations, generation is a pure function of those inputs; the
random source is injected so tests can pin it.

Live-data intents (github, leetcode, blogs, linkedin) render a detailed
answer when their cache slot is populated and a one-line profile link when
it is not.  Response templates may carry [UPPER_CASE] markers; every marker
is substituted before the text leaves this module.
"""

import logging
import random
import re
from typing import Optional

from intent_rules import DEFAULT_INTENT, INAPPROPRIATE_SUBTYPES

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\[([A-Z][A-Z_]*)\]")

_SUBTYPES = [(re.compile(p, re.IGNORECASE), key) for p, key in INAPPROPRIATE_SUBTYPES]

# intent -> responses key, for intents answered straight from the knowledge base
_STATIC_RESPONSES = {
    "greeting":            "greeting",
    "about_bot":           "about_bot",
    "about_creator":       "about_creator",
    "tech_stack":          "tech_stack",
    "skills":              "tech_stack",
    "contact":             "contact",
    "job_seeking":         "job_seeking",
    "resume":              "resume",
    "location":            "location",
    "portfolio_tech":      "portfolio_tech",
    "source_code":         "source_code",
    "favorite_frameworks": "favorite_frameworks",
    "collaboration":       "collaboration",
    "learning_first":      "learning_first_language",
    "build_portfolio":     "build_portfolio",
    "resources":           "resources",
    "mentoring":           "mentoring",
    "freelance":           "freelance",
    "experience":          "experience_domains",
    "pricing":             "pricing",
    "why_developer":       "why_developer",
    "learning_journey":    "background",
    "open_source":         "open_source",
    "personal_info":       "personal_info",
    "education":           "education",
    "college":             "college",
    "degree":              "degree",
    "schooling":           "schooling",
    DEFAULT_INTENT:        "default",
}

FUZZY_DISCLAIMER = (
    "\n\n⚠️ *Note: This answer was extracted from my knowledge base with "
    "{confidence}% confidence and may not perfectly match your question. "
    "For more accurate info, please rephrase or contact {owner} directly.*"
)


def pick_variation(value, rng=random) -> str:
    """Return *value* itself, or one uniformly chosen element when it is a list."""
    if isinstance(value, list):
        if not value:
            return ""
        return value[rng.randrange(len(value))]
    return value if isinstance(value, str) else ""


class ResponseGenerator:
    """
    Builds reply text from the knowledge base plus a cache snapshot.

    Parameters
    ----------
    knowledge_base : dict          – validated knowledge base
    rng            : random.Random – source for variation choice (module
                                     ``random`` when omitted)
    """

    def __init__(self, knowledge_base: dict, rng=None):
        self.kb       = knowledge_base
        self.rng      = rng if rng is not None else random
        self.social   = knowledge_base.get("social") or {}
        self.personal = knowledge_base.get("personal") or {}

        self._live = {
            "projects":      self._projects,
            "github":        self._github,
            "leetcode":      self._leetcode,
            "blogs":         self._blogs,
            "linkedin":      self._linkedin,
            "cgpa":          self._cgpa,
            "inappropriate": self._inappropriate,
        }

    # ── Public API ───────────────────────────────────────────────────────────

    def handles(self, intent: str) -> bool:
        return intent in self._live or intent in _STATIC_RESPONSES

    def generate(self, intent: str, message: str = "", snapshot: Optional[dict] = None) -> str:
        """
        Produce the reply for *intent*.

        Unknown intents get the knowledge-base fallback.  Never returns an
        empty string.
        """
        snapshot = snapshot or {}

        if intent in self._live:
            text = self._live[intent](message or "", snapshot)
        elif intent in _STATIC_RESPONSES:
            text = self.render(self.variation(_STATIC_RESPONSES[intent]), snapshot)
        else:
            logger.warning("No response handler for intent '%s'", intent)
            text = self.fallback()

        return text or self.fallback()

    def generate_fuzzy(self, result: dict) -> str:
        """Reply for a validated fuzzy hit, with a confidence disclaimer."""
        if result.get("type") == "response":
            text = self.render(result["content"], {})
        else:
            text = f"Based on your question, here's what I found:\n\n{result['content']}"
        owner = self.personal.get("name") or "the owner"
        return text + FUZZY_DISCLAIMER.format(confidence=result.get("confidence", 0), owner=owner)

    def fallback(self) -> str:
        return pick_variation(self.kb["responses"].get("fallback"), self.rng) or "Sorry, I can't answer that right now."

    def variation(self, key: str) -> str:
        """One variation of responses[*key*]; the fallback if the key is missing."""
        value = self.kb["responses"].get(key)
        if value is None:
            logger.warning("Knowledge base has no response '%s'", key)
            return self.fallback()
        return pick_variation(value, self.rng)

    def render(self, template: str, snapshot: dict) -> str:
        """Substitute every [MARKER] in *template*; unknown markers are dropped."""
        values = {
            "GITHUB_REPOS":    self._repo_list(snapshot),
            "COMPANY_NAME":    self.personal.get("current_company") or "his current company",
            "PROJECT_DETAILS": "exciting projects",
        }

        def _sub(match):
            name = match.group(1)
            if name not in values:
                logger.warning("Unknown placeholder [%s] removed from response", name)
                return ""
            return values[name]

        return _PLACEHOLDER.sub(_sub, template)

    # ── Profile links ────────────────────────────────────────────────────────

    def github_url(self) -> str:
        return f"https://github.com/{self.social.get('github', '')}"

    def leetcode_url(self) -> str:
        return f"https://leetcode.com/u/{self.social.get('leetcode', '')}"

    def medium_url(self) -> str:
        return f"https://medium.com/{self.social.get('medium', '')}"

    def linkedin_url(self) -> str:
        return f"https://linkedin.com/in/{self.social.get('linkedin', '')}"

    # ── Intent handlers ──────────────────────────────────────────────────────

    def _repo_list(self, snapshot: dict) -> str:
        github = snapshot.get("github")
        if not github or not github.get("top_repos"):
            return f"Check GitHub: {self.github_url()}"
        return "\n".join(
            f"{i}. {r['name']} ({r.get('language') or 'N/A'}) - {r['url']}"
            for i, r in enumerate(github["top_repos"], start=1)
        )

    def _projects(self, message: str, snapshot: dict) -> str:
        return self.render(self.variation("projects_latest"), snapshot)

    def _github(self, message: str, snapshot: dict) -> str:
        gh = snapshot.get("github")
        if not gh:
            return f"Check out GitHub: {self.github_url()}"

        lines = [
            f"GitHub Stats for @{gh['username']}:",
            "",
            f"📦 {gh['repos']} public repositories",
            f"⭐ {gh['stars']} total stars",
            f"👥 {gh['followers']} followers",
            f"💻 Top languages: {gh['languages'] or 'N/A'}",
            "",
            "Latest repos:",
        ]
        for i, repo in enumerate(gh.get("top_repos") or [], start=1):
            lines.append(f"{i}. {repo['name']} ({repo.get('language') or 'N/A'})")
            if repo.get("description"):
                lines.append(f"   {repo['description']}")
            lines.append(f"   {repo['url']}")
        lines.append("")
        lines.append(f"Full profile: https://github.com/{gh['username']}")
        return "\n".join(lines)

    def _leetcode(self, message: str, snapshot: dict) -> str:
        lc = snapshot.get("leetcode")
        if not lc:
            return f"LeetCode: {self.leetcode_url()}"
        return (
            f"LeetCode Stats for @{lc['username']}:\n\n"
            f"✅ Total Solved: {lc['total']}\n"
            f"🟢 Easy: {lc['easy']}\n"
            f"🟡 Medium: {lc['medium']}\n"
            f"🔴 Hard: {lc['hard']}\n\n"
            f"Profile: https://leetcode.com/u/{lc['username']}"
        )

    def _blogs(self, message: str, snapshot: dict) -> str:
        medium = snapshot.get("medium")
        if medium and medium.get("posts"):
            parts = ["Latest blog posts:\n"]
            for i, post in enumerate(medium["posts"], start=1):
                parts.append(f"{i}. {post['title']}\n   {post['link']}\n")
            parts.append(f"Read more: {self.medium_url()}")
            text = "\n".join(parts)
        else:
            text = f"Check out Medium: {self.medium_url()}"
        return text + "\n\n" + self.render(self.variation("blog_frequency"), snapshot)

    def _linkedin(self, message: str, snapshot: dict) -> str:
        li = snapshot.get("linkedin")
        if not li:
            return f"LinkedIn: {self.linkedin_url()}\n\nConnect for professional networking!"

        text = f"LinkedIn Profile: {li['profile_url']}\n\n"
        if li.get("connections"):
            text += f"🤝 {li['connections']}+ connections\n"
        if li.get("followers"):
            text += f"👥 {li['followers']} followers\n\n"

        post = li.get("latest_post")
        if post:
            text += "📝 Latest Post:\n"
            text += f"\"{post.get('text', '')}\"\n\n"
            text += f"❤️ {post.get('likes', 0)} likes | "
            text += f"💬 {post.get('comments', 0)} comments | "
            text += f"🔄 {post.get('shares', 0)} shares\n"
            if post.get("url"):
                text += f"🔗 {post['url']}\n\n"

        return text + "Connect for professional networking!"

    def _cgpa(self, message: str, snapshot: dict) -> str:
        education = self.kb.get("education") or []
        degree    = next((e for e in education if e.get("cgpa") is not None), None)
        if degree is None:
            return "Education data not found in knowledge base."

        field = f" {degree['field']}" if degree.get("field") else ""
        year  = f" ({degree['year']})" if degree.get("year") else ""
        lines = [
            "Academic Performance:",
            "",
            f"🎓 {degree.get('level', 'Degree')}{field}: {degree['cgpa']} CGPA{year}",
        ]
        for record in education:
            if record is degree or record.get("percentage") is None:
                continue
            rec_year = f" ({record['year']})" if record.get("year") else ""
            lines.append(f"📚 {record.get('level', 'School')}: {record['percentage']}%{rec_year}")
        return "\n".join(lines)

    def _inappropriate(self, message: str, snapshot: dict) -> str:
        for pattern, key in _SUBTYPES:
            if pattern.search(message):
                return self.variation(key)
        return self.fallback()
