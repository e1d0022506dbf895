"""Templates - Prompts, characters and fixed text for generation."""

from dataclasses import dataclass

from ..models.enums import HalloweenCharacter

# =============================================================================
# CHARACTERS
# =============================================================================


@dataclass(frozen=True)
class CharacterProfile:
    """A named character used in stories and error payloads."""

    name: str
    type: HalloweenCharacter
    personality: str
    catchphrase: str


STORY_CHARACTERS: tuple[CharacterProfile, ...] = (
    CharacterProfile(
        name="Professor Ghostly",
        type=HalloweenCharacter.GHOST,
        personality="Wise and encouraging, loves to help students learn",
        catchphrase="Boo-tiful learning awaits!",
    ),
    CharacterProfile(
        name="Madame Mystique",
        type=HalloweenCharacter.WITCH,
        personality="Mysterious but helpful, speaks in riddles about knowledge",
        catchphrase="Knowledge is the most powerful spell!",
    ),
    CharacterProfile(
        name="Count Studula",
        type=HalloweenCharacter.VAMPIRE,
        personality="Dramatic and theatrical, passionate about education",
        catchphrase="I vant to teach you something new!",
    ),
    CharacterProfile(
        name="Bonnie Bones",
        type=HalloweenCharacter.SKELETON,
        personality="Cheerful and energetic despite being bones",
        catchphrase="Learning is in my bones!",
    ),
)

ERROR_CHARACTERS: tuple[CharacterProfile, ...] = (
    CharacterProfile(
        name="Friendly Ghost",
        type=HalloweenCharacter.GHOST,
        personality="helpful and encouraging",
        catchphrase="Boo-hoo! Don't worry, we can fix this!",
    ),
    CharacterProfile(
        name="Wise Witch",
        type=HalloweenCharacter.WITCH,
        personality="knowledgeable and patient",
        catchphrase="Hocus pocus! Let me help you focus!",
    ),
    CharacterProfile(
        name="Cheerful Vampire",
        type=HalloweenCharacter.VAMPIRE,
        personality="optimistic and supportive",
        catchphrase="Blah! No need to be batty about this error!",
    ),
    CharacterProfile(
        name="Helpful Skeleton",
        type=HalloweenCharacter.SKELETON,
        personality="straightforward and clear",
        catchphrase="Bone-afide advice coming your way!",
    ),
)

# =============================================================================
# QUIZ GENERATION
# =============================================================================

QUIZ_SYSTEM_PROMPT = (
    "You are a Halloween-themed educational quiz generator. Create engaging "
    "multiple-choice questions that test comprehension of the provided story "
    "content. Always respond with valid JSON only."
)

DIFFICULTY_INSTRUCTIONS = {
    "easy": "Focus on basic comprehension and main concepts. Use simple language.",
    "medium": "Include some analysis and application questions. Mix recall and understanding.",
    "hard": "Include complex analysis, synthesis, and evaluation questions. Challenge critical thinking.",
}

QUIZ_GENERATION_PROMPT = """Generate {question_count} multiple-choice questions based on this educational story content:

{content}

Requirements:
- Difficulty level: {difficulty} ({instructions})
- Each question should have 4 distinct options (A, B, C, D)
- Include detailed explanations for correct answers
- Focus on educational content, not Halloween elements
- Questions should test understanding of key concepts

Respond with ONLY a JSON array in this exact format:
[
  {{
    "question": "What is the main concept explained in the story?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "explanation": "Detailed explanation of why this answer is correct and what concept it relates to."
  }}
]
"""

BLANK = "______"

# Stopwords never offered as contextual distractors
DISTRACTOR_STOPWORDS = frozenset(
    {"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "from"}
)

GENERIC_DISTRACTORS: tuple[str, ...] = (
    "Halloween",
    "Spooky",
    "Mystery",
    "Magic",
    "Phantom",
    "Shadow",
    "Midnight",
    "Enchanted",
)

# Fixed questions appended when the text is too short for the target count.
# Each entry: (prompt, options, correct_index, explanation)
COMPREHENSION_QUESTIONS: tuple[tuple[str, tuple[str, str, str, str], int, str], ...] = (
    (
        "What was the main topic covered in this lesson?",
        (
            "Halloween traditions and customs",
            "The educational content from your study material",
            "Ghost stories and folklore",
            "Spooky character biographies",
        ),
        1,
        "The story was designed to help you learn your study material by wrapping it "
        "in an engaging Halloween theme!",
    ),
    (
        "Why did the spooky characters tell you this story?",
        (
            "To scare you away from studying",
            "To advertise a haunted house",
            "To help you remember your study material",
            "To teach you a magic spell",
        ),
        2,
        "The characters are study companions: the narrative exists to make your "
        "material easier to remember.",
    ),
    (
        "What is the best way to master the material in this story?",
        (
            "Skip the story and guess the answers",
            "Review the key points and retake the quiz",
            "Only read the title",
            "Wait until next Halloween",
        ),
        1,
        "Reviewing the key learning points and practicing with quizzes is how "
        "knowledge sticks.",
    ),
)

# =============================================================================
# STORY GENERATION
# =============================================================================

STORY_SYSTEM_PROMPT = (
    "You are a creative writing assistant that specializes in educational "
    "Halloween-themed stories. Create engaging, memorable stories that help "
    "students learn while having fun."
)

STORY_GENERATION_PROMPT = """Transform the following educational content into an engaging Halloween-themed story that helps students learn and remember the material.

CHARACTERS TO INCLUDE:
{characters}

REQUIREMENTS:
- Make it educational and memorable
- Keep the spooky theme fun, not scary
- Include the characters naturally in the story
- Maintain all important learning concepts
- Make it engaging for students aged 13-25
- Use a narrative structure with beginning, middle, and end
- Include dialogue from the characters using their catchphrases

ORIGINAL CONTENT:
{content}

Create a spooky story that teaches this material:"""

STORY_TITLE_PROMPT = (
    "Create a short, catchy Halloween-themed title for this educational story. "
    "Include relevant emojis. Keep it under 60 characters:\n\n{excerpt}..."
)

DEFAULT_STORY_TITLE = "🎃 The Haunted Lesson 👻"

STUDY_SECTION_HEADER = "📚 **The Ancient Knowledge Revealed** 📚"
LESSON_SECTION_HEADER = "✨ **The Lesson Learned** ✨"

# =============================================================================
# LEVELS
# =============================================================================

# (level, title, icon); levels above the table reuse the last entry
LEVEL_TITLES: tuple[tuple[int, str, str], ...] = (
    (1, "Novice Apprentice", "🎭"),
    (2, "Curious Student", "📚"),
    (3, "Eager Learner", "✨"),
    (4, "Spell Weaver", "🪄"),
    (5, "Knowledge Seeker", "🔮"),
    (6, "Wisdom Gatherer", "📜"),
    (7, "Mystic Scholar", "🧙‍♀️"),
    (8, "Arcane Master", "⚡"),
    (9, "Grand Sorcerer", "👑"),
    (10, "Legendary Sage", "🌟"),
)
