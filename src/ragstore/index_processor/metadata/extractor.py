"""Rule-based metadata extraction for text chunks.

The extractor is pure: the same content and options always produce the
same ``ExtractedMetadata``, and nothing is read from or written to the
outside world. Every facet is computed with fixed regular expressions.
"""

import math
import re

from loguru import logger

from ragstore.config.models import ExtractionOptions
from ragstore.entities.metadata import (
    ComplexityLevel,
    ContentCategory,
    ExtractedMetadata,
    Heading,
)

WORDS_PER_MINUTE = 200
MAX_TOPICS = 10
MAX_KEYWORDS = 20

# Dict order is the tie-break order for equal scores
CATEGORY_PATTERNS: dict[ContentCategory, list[re.Pattern]] = {
    ContentCategory.CODE: [
        re.compile(r"^import\s+", re.M),
        re.compile(r"^export\s+", re.M),
        re.compile(r"^class\s+\w+", re.M),
        re.compile(r"^function\s+\w+", re.M),
        re.compile(r"^const\s+\w+\s*=", re.M),
        re.compile(r"^interface\s+\w+", re.M),
    ],
    ContentCategory.DOCUMENTATION: [
        re.compile(r"^#{1,6}\s+", re.M),
        re.compile(r"^\*\s+", re.M),
        re.compile(r"^>\s+", re.M),
        re.compile(r"\[.*\]\(.*\)"),
        re.compile(r"^```", re.M),
    ],
    ContentCategory.CONFIGURATION: [
        re.compile(r'^{\s*".*":', re.M),
        re.compile(r"^---\n", re.M),
        re.compile(r"^\w+:\s*$", re.M),
        re.compile(r"\.env", re.I),
        re.compile(r"config", re.I),
    ],
    ContentCategory.WORKFLOW: [
        re.compile(r"workflow", re.I),
        re.compile(r"execution", re.I),
        re.compile(r"checkpoint", re.I),
        re.compile(r"state machine", re.I),
        re.compile(r"langgraph", re.I),
    ],
    ContentCategory.TASK: [
        re.compile(r"task", re.I),
        re.compile(r"todo", re.I),
        re.compile(r"requirement", re.I),
        re.compile(r"user story", re.I),
        re.compile(r"acceptance criteria", re.I),
    ],
    ContentCategory.TEST: [
        re.compile(r"describe\("),
        re.compile(r"it\("),
        re.compile(r"test\("),
        re.compile(r"expect\("),
        re.compile(r"assert", re.I),
    ],
}

# (substring, category), checked in order
CATEGORY_HINTS = [
    ("workflow", ContentCategory.WORKFLOW),
    ("task", ContentCategory.TASK),
    ("test", ContentCategory.TEST),
    ("config", ContentCategory.CONFIGURATION),
]

TECHNICAL_TERMS = re.compile(r"algorithm|architecture|implementation|optimization|concurrency", re.I)

TECHNICAL_KEYWORDS = [
    "async", "await", "promise", "observable", "stream",
    "api", "rest", "graphql", "websocket",
    "database", "query", "index", "cache",
    "authentication", "authorization", "security",
    "performance", "optimization", "scale",
]

KEYWORD_PATTERNS = [
    re.compile(r"""import\s+.*?from\s+['"](.+?)['"]"""),
    re.compile(r"class\s+(\w+)"),
    re.compile(r"interface\s+(\w+)"),
    re.compile(r"function\s+(\w+)"),
    re.compile(r"const\s+(\w+)"),
]

TOPIC_PATTERNS = [
    re.compile(r"\b(?:api|service|component|module|function|class|interface)\s+\w+", re.I),
    re.compile(r"\b\w+(?:Service|Controller|Component|Module|Factory|Provider)\b"),
]

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$", re.M)
BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*")

LINK_TARGET = re.compile(r"\[.*?\]\((.*?)\)")
PATH_REFERENCE = re.compile(r"""(?:from|import|require)\s+['"](.+?)['"]""")
ID_REFERENCE = re.compile(r"\b(?:TASK|DOC|WF|REQ)[-_]\w+")

CODE_IMPORTS = re.compile(r"""(?:import|require)\s+.*?(?:from\s+)?['"](.+?)['"]""")
CODE_EXPORTS = re.compile(r"export\s+(?:default\s+)?(?:class|function|const|interface)\s+(\w+)")
CODE_FUNCTIONS = re.compile(r"(?:function|const|let|var)\s+(\w+)\s*(?:=\s*)?(?:\([^)]*\)|async)")
CODE_CLASSES = re.compile(r"class\s+(\w+)")

LANGUAGE_PATTERNS: dict[str, list[re.Pattern]] = {
    "typescript": [
        re.compile(r":\s*\w+(?:<.*?>)?(?:\[\])?"),
        re.compile(r"interface\s+\w+"),
        re.compile(r"type\s+\w+\s*="),
    ],
    "javascript": [
        re.compile(r"function\s+\w+"),
        re.compile(r"const\s+\w+\s*="),
        re.compile(r"=>"),
    ],
    "python": [
        re.compile(r"def\s+\w+"),
        re.compile(r"import\s+\w+"),
        re.compile(r"if\s+__name__"),
    ],
    "java": [
        re.compile(r"public\s+class"),
        re.compile(r"private\s+\w+"),
        re.compile(r"package\s+\w+"),
    ],
    "csharp": [
        re.compile(r"namespace\s+\w+"),
        re.compile(r"public\s+class"),
        re.compile(r"using\s+\w+"),
    ],
}

FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
INDENTED_BLOCK_START = re.compile(r"^ {4}\S", re.M)
INDENTED_LINE = re.compile(r"^( {4}|\t).+$", re.M)
TABLE_ROW = re.compile(r"\|.*\|.*\|")
HTML_TABLE = re.compile(r"<table", re.I)
BULLET_ITEM = re.compile(r"^\s*[-*+]\s+", re.M)
NUMBERED_ITEM = re.compile(r"^\s*\d+\.\s+", re.M)


def _unique(items, limit: int | None = None) -> list[str]:
    """Deduplicate keeping first-seen order, then truncate."""
    result = list(dict.fromkeys(items))
    return result[:limit] if limit is not None else result


class MetadataExtractor:
    """Extracts category, complexity, topics and other facets from text.

    Example:
        >>> extractor = MetadataExtractor()
        >>> meta = extractor.extract("import { Foo } from 'bar';\\nexport class Baz {}")
        >>> meta.category
        <ContentCategory.CODE: 'code'>
    """

    def extract(
        self,
        content: str,
        options: ExtractionOptions | None = None,
        content_type: str | None = None,
    ) -> ExtractedMetadata:
        """Extract metadata from one piece of content.

        Args:
            content: Text to analyse; non-string input is treated as empty
            options: Which optional facets to compute (all by default)
            content_type: Category hint; overrides ``options.content_type``

        Returns:
            Immutable ExtractedMetadata
        """
        if not isinstance(content, str):
            logger.debug(f"Non-string content ({type(content).__name__}) treated as empty")
            content = ""
        options = options or ExtractionOptions()
        hint = content_type if content_type is not None else options.content_type

        category = self.categorize_content(content, hint)
        fields: dict = {
            "category": category,
            "headings": self.extract_headings(content),
            "has_code_blocks": self.has_code_blocks(content),
            "code_block_count": self.count_code_blocks(content),
            "has_tables": self.has_tables(content),
            "has_lists": self.has_lists(content),
        }

        if options.analyze_complexity:
            fields["complexity"] = self.analyze_complexity(content, category)
        if options.extract_topics:
            fields["topics"] = self.extract_topics(content)
        if options.extract_keywords:
            fields["keywords"] = self.extract_keywords(content)
        if options.calculate_reading_time:
            fields["reading_time_minutes"] = self.calculate_reading_time(content)
        if options.detect_cross_references:
            fields["cross_references"] = self.detect_cross_references(content)
        if options.extract_code_metadata and category == ContentCategory.CODE:
            fields.update(self.extract_code_metadata(content))

        fields["confidence"] = self._confidence(fields)
        return ExtractedMetadata(**fields)

    def categorize_content(self, content: str, hint: str | None = None) -> ContentCategory:
        """Pick the category whose pattern group matches most often.

        A hint containing workflow/task/test/config short-circuits scoring.
        """
        if hint:
            for needle, category in CATEGORY_HINTS:
                if needle in hint:
                    return category

        best, best_score = ContentCategory.GENERAL, 0
        for category, patterns in CATEGORY_PATTERNS.items():
            score = sum(1 for pattern in patterns if pattern.search(content))
            if score > best_score:
                best, best_score = category, score
        return best

    def analyze_complexity(self, content: str, category: ContentCategory) -> ComplexityLevel:
        score = 0

        lines = len(content.split("\n"))
        if lines > 100:
            score += 2
        elif lines > 50:
            score += 1

        if category == ContentCategory.CODE:
            if re.search(r"async\s+function|Promise|Observable", content, re.I):
                score += 1
            if re.search(r"class.*extends|implements", content, re.I):
                score += 1
            if re.search(r"generic|<.*>", content, re.I):
                score += 1
        elif category == ContentCategory.WORKFLOW:
            if re.search(r"parallel|concurrent", content, re.I):
                score += 2
            if re.search(r"condition|branch", content, re.I):
                score += 1
        elif category == ContentCategory.DOCUMENTATION:
            heading_count = len(re.findall(r"^#{1,6}\s+", content, re.M))
            if heading_count > 10:
                score += 2
            elif heading_count > 5:
                score += 1

        if len(TECHNICAL_TERMS.findall(content)) > 5:
            score += 1

        if score >= 4:
            return ComplexityLevel.COMPLEX
        if score >= 2:
            return ComplexityLevel.MODERATE
        return ComplexityLevel.SIMPLE

    def extract_topics(self, content: str) -> list[str]:
        topics = []

        for match in HEADING_PATTERN.finditer(content):
            topic = match.group(2).strip()
            if 3 < len(topic) < 50:
                topics.append(topic.lower())

        for match in BOLD_PATTERN.finditer(content):
            topic = match.group(1).strip()
            if 3 < len(topic) < 30:
                topics.append(topic.lower())

        for pattern in TOPIC_PATTERNS:
            for match in pattern.finditer(content):
                if len(match.group(0)) < 30:
                    topics.append(match.group(0).lower())

        return _unique(topics, MAX_TOPICS)

    def extract_keywords(self, content: str) -> list[str]:
        keywords = [
            keyword
            for keyword in TECHNICAL_KEYWORDS
            if re.search(rf"\b{keyword}\b", content, re.I)
        ]

        for pattern in KEYWORD_PATTERNS:
            for match in pattern.finditer(content):
                name = match.group(1)
                if name and 2 < len(name) < 30:
                    keywords.append(name.lower())

        return _unique(keywords, MAX_KEYWORDS)

    def extract_headings(self, content: str) -> list[Heading]:
        return [
            Heading(level=len(match.group(1)), text=match.group(2).strip())
            for match in HEADING_PATTERN.finditer(content)
        ]

    def calculate_reading_time(self, content: str) -> int:
        """Minutes at 200 words per minute, rounded up."""
        return math.ceil(len(content.split()) / WORDS_PER_MINUTE)

    def detect_cross_references(self, content: str) -> list[str]:
        references = [target for target in LINK_TARGET.findall(content) if target]
        references.extend(PATH_REFERENCE.findall(content))
        references.extend(ID_REFERENCE.findall(content))
        return _unique(references)

    def extract_code_metadata(self, content: str) -> dict:
        return {
            "code_language": self.detect_code_language(content),
            "imports": _unique(CODE_IMPORTS.findall(content)),
            "exports": _unique(CODE_EXPORTS.findall(content)),
            "functions": _unique(CODE_FUNCTIONS.findall(content)),
            "classes": _unique(CODE_CLASSES.findall(content)),
        }

    def detect_code_language(self, content: str) -> str:
        best, best_score = "plaintext", 0
        for language, patterns in LANGUAGE_PATTERNS.items():
            score = sum(1 for pattern in patterns if pattern.search(content))
            if score > best_score:
                best, best_score = language, score
        return best

    def has_code_blocks(self, content: str) -> bool:
        return bool(FENCED_BLOCK.search(content) or INDENTED_BLOCK_START.search(content))

    def count_code_blocks(self, content: str) -> int:
        fenced = len(FENCED_BLOCK.findall(content))
        # Rough estimate: four indented lines count as one block
        indented = len(INDENTED_LINE.findall(content)) // 4
        return fenced + indented

    def has_tables(self, content: str) -> bool:
        return bool(TABLE_ROW.search(content) or HTML_TABLE.search(content))

    def has_lists(self, content: str) -> bool:
        return bool(BULLET_ITEM.search(content) or NUMBERED_ITEM.search(content))

    @staticmethod
    def _confidence(fields: dict) -> float:
        score = 0.5
        if fields["category"] != ContentCategory.GENERAL:
            score += 0.1
        if fields.get("topics"):
            score += 0.1
        if len(fields.get("keywords") or []) > 3:
            score += 0.1
        if fields["headings"]:
            score += 0.1
        if fields.get("complexity") is not None:
            score += 0.05
        if fields.get("code_language") not in (None, "plaintext"):
            score += 0.05
        return round(min(score, 1.0), 2)
