"""Placement test: the fixed question bank and server-side grading."""

from dataclasses import dataclass

from flowlingo.services.level_structure import get_hsk_level


@dataclass(frozen=True)
class AssessmentQuestion:
    """A placement question.

    ``chinese``/``pinyin``/``english`` describe the word or phrase being
    tested; a wrong answer adds it to the learner's flashcard deck.
    """

    id: str
    type: str
    question: str
    options: tuple[str, ...]
    correct_answer: str
    level: int
    chinese: str
    pinyin: str
    english: str

    def to_dict(self) -> dict:
        """Client view; the correct answer stays on the server."""
        return {
            "id": self.id,
            "type": self.type,
            "question": self.question,
            "options": list(self.options),
            "level": self.level,
        }


ASSESSMENT_QUESTIONS = (
    AssessmentQuestion(
        "q1", "pronunciation", "Which character has the 3rd tone?",
        ("好 (hǎo)", "吗 (ma)", "是 (shì)", "去 (qù)"), "好 (hǎo)",
        1, "好", "hǎo", "good",
    ),
    AssessmentQuestion(
        "q2", "sentence-building",
        "Put these words in the correct order to make: 'I am a student'",
        ("学生/是/我", "我/是/学生", "是/我/学生", "我/学生/是"), "我/是/学生",
        2, "我是学生", "wǒ shì xuéshēng", "I am a student",
    ),
    AssessmentQuestion(
        "q3", "tone-pair", "Which word has the 4th tone followed by 1st tone?",
        ("北京 (běijīng)", "上海 (shànghǎi)", "中国 (zhōngguó)", "美国 (měiguó)"),
        "上海 (shànghǎi)",
        3, "上海", "shànghǎi", "Shanghai",
    ),
    AssessmentQuestion(
        "q4", "sentence-building", "Complete the sentence: 我___中文 (I ___ Chinese)",
        ("学", "说", "写", "看"), "学",
        4, "学", "xué", "study",
    ),
    AssessmentQuestion(
        "q5", "multiple-choice", "What is the meaning of this idiom? 马马虎虎",
        ("excellent", "so-so", "terrible", "quick"), "so-so",
        5, "马马虎虎", "mǎmǎhūhū", "so-so",
    ),
    AssessmentQuestion(
        "q6", "grammar", "Choose the correct measure word: 一___书 (one book)",
        ("个", "本", "张", "支"), "本",
        6, "本", "běn", "measure word for books",
    ),
    AssessmentQuestion(
        "q7", "sentence-building",
        "Arrange to form: 'Although it's raining, I still want to go out'",
        (
            "虽然/下雨/我/还是/想/出去",
            "下雨/虽然/我/想/还是/出去",
            "我/虽然/下雨/还是/想/出去",
            "虽然/我/下雨/还是/想/出去",
        ),
        "虽然/下雨/我/还是/想/出去",
        8, "虽然下雨，我还是想出去", "suīrán xiàyǔ, wǒ háishì xiǎng chūqù",
        "Although it's raining, I still want to go out",
    ),
    AssessmentQuestion(
        "q8", "classical", "What does this classical Chinese phrase mean? 学而时习之",
        (
            "to learn and practice repeatedly",
            "to teach others",
            "to forget quickly",
            "to study hard",
        ),
        "to learn and practice repeatedly",
        10, "学而时习之", "xué ér shí xí zhī", "to learn and practice repeatedly",
    ),
    AssessmentQuestion(
        "q9", "complex-grammar", "Choose the sentence with correct 把 structure:",
        ("我把书看完了", "我看把书完了", "我看完把书了", "把我书看完了"),
        "我把书看完了",
        12, "我把书看完了", "wǒ bǎ shū kàn wán le", "I finished reading the book",
    ),
    AssessmentQuestion(
        "q10", "idiom",
        "Complete the chengyu: 一石___鸟 (kill two birds with one stone)",
        ("一", "二", "三", "四"), "二",
        15, "一石二鸟", "yī shí èr niǎo", "kill two birds with one stone",
    ),
    AssessmentQuestion(
        "q11", "formal-register", "Which is the most formal way to say 'thank you'?",
        ("谢谢", "多谢", "感谢您", "谢了"), "感谢您",
        20, "感谢您", "gǎnxiè nín", "thank you (formal)",
    ),
    AssessmentQuestion(
        "q12", "advanced-grammar", "Select the sentence using 不但...而且 correctly:",
        (
            "他不但聪明而且努力",
            "他不但聪明而且也努力",
            "不但他聪明而且努力",
            "他聪明不但而且努力",
        ),
        "他不但聪明而且努力",
        25, "不但...而且", "bùdàn...érqiě", "not only...but also",
    ),
)

RECOMMENDATIONS = (
    (9, [
        "Practice advanced reading comprehension",
        "Focus on idiomatic expressions and cultural nuances",
        "Engage in complex conversation practice",
    ]),
    (7, [
        "Strengthen intermediate grammar patterns",
        "Expand vocabulary through reading practice",
        "Practice speaking and pronunciation",
    ]),
    (5, [
        "Review fundamental grammar structures",
        "Build core vocabulary systematically",
        "Practice basic conversation skills",
    ]),
    (0, [
        "Start with character recognition and basic vocabulary",
        "Learn essential phrases for daily communication",
        "Focus on pronunciation and tones",
    ]),
)


def recommendations_for(score: int) -> list[str]:
    for min_score, tips in RECOMMENDATIONS:
        if score >= min_score:
            return list(tips)
    return list(RECOMMENDATIONS[-1][1])


def grade(answers: dict[str, str], questions=ASSESSMENT_QUESTIONS) -> dict:
    """Score submitted answers. Unanswered questions count as wrong.

    Strengths and weaknesses are question types; a type counts as a
    strength only if every question of that type was answered correctly.
    """
    wrong = [q for q in questions if answers.get(q.id) != q.correct_answer]
    wrong_types = {q.type for q in wrong}

    strengths = []
    weaknesses = []
    for q in questions:
        bucket = weaknesses if q.type in wrong_types else strengths
        if q.type not in bucket:
            bucket.append(q.type)

    return {
        "score": len(questions) - len(wrong),
        "total_questions": len(questions),
        "wrong": wrong,
        "strengths": strengths,
        "weaknesses": weaknesses,
    }


def flashcard_fields(question: AssessmentQuestion) -> dict:
    """Deck entry for a missed question."""
    return {
        "character": question.chinese,
        "pinyin": question.pinyin,
        "english": question.english,
        "hsk_level": get_hsk_level(question.level),
        "source": "assessment",
    }
