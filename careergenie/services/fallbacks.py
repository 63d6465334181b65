# =============================================================================
# careergenie/services/fallbacks.py — Canned content used when no provider answers
# =============================================================================

import re

AVAILABLE_ROLES = [
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "Data Scientist",
    "Machine Learning Engineer",
    "DevOps Engineer",
    "UI/UX Designer",
    "Product Manager",
    "Business Analyst",
    "Cloud Engineer",
    "Mobile Developer (Android)",
    "Mobile Developer (iOS)",
    "QA Engineer",
    "Cybersecurity Engineer",
    "Database Administrator",
    "Software Architect",
    "Game Developer",
    "Blockchain Developer",
    "AI Engineer",
    "Digital Marketing Specialist",
]

FALLBACK_QUESTIONS: dict[str, list[dict[str, str]]] = {
    "Frontend Developer": [
        {"question": "Explain the difference between let, const, and var in JavaScript.", "type": "technical", "difficulty": "medium",
         "sample_answer": "let and const are block-scoped, while var is function-scoped. const creates immutable bindings, while let allows reassignment."},
        {"question": "What is the virtual DOM in React?", "type": "technical", "difficulty": "medium",
         "sample_answer": "The virtual DOM is a lightweight copy of the actual DOM that React uses to optimize updates."},
        {"question": "How do you optimize website performance?", "type": "technical", "difficulty": "hard",
         "sample_answer": "Key strategies include code splitting, lazy loading, image optimization, minification, and caching."},
        {"question": "Explain CSS specificity.", "type": "technical", "difficulty": "medium",
         "sample_answer": "CSS specificity determines which styles apply when multiple rules target the same element."},
        {"question": "What are React hooks?", "type": "technical", "difficulty": "medium",
         "sample_answer": "Hooks let you use state and lifecycle features in functional components."},
    ],
    "Backend Developer": [
        {"question": "Explain RESTful API design principles.", "type": "technical", "difficulty": "medium",
         "sample_answer": "REST uses HTTP methods, stateless communication, resource-based URLs, and standardized responses."},
        {"question": "What is the difference between SQL and NoSQL?", "type": "technical", "difficulty": "medium",
         "sample_answer": "SQL databases are relational with fixed schemas. NoSQL offers flexible schemas and horizontal scaling."},
        {"question": "How do you handle authentication?", "type": "technical", "difficulty": "hard",
         "sample_answer": "Use JWT tokens, OAuth, session management, or API keys with proper validation."},
        {"question": "Explain middleware in a web framework.", "type": "technical", "difficulty": "medium",
         "sample_answer": "Middleware wraps request handling and can inspect or modify requests and responses, or end the request early."},
        {"question": "What are microservices?", "type": "technical", "difficulty": "hard",
         "sample_answer": "Microservices break applications into small, independent services for better scalability."},
    ],
    "General": [
        {"question": "Tell me about yourself.", "type": "behavioral", "difficulty": "easy",
         "sample_answer": "Provide a concise overview of your background and key experiences."},
        {"question": "What are your greatest strengths?", "type": "behavioral", "difficulty": "easy",
         "sample_answer": "Choose 2-3 strengths relevant to the role with specific examples."},
        {"question": "What is your biggest weakness?", "type": "behavioral", "difficulty": "medium",
         "sample_answer": "Choose a genuine weakness and explain how you're working to improve it."},
        {"question": "Why do you want to work here?", "type": "behavioral", "difficulty": "medium",
         "sample_answer": "Research the company and mention specific aspects that excite you."},
        {"question": "Describe a challenging situation.", "type": "behavioral", "difficulty": "medium",
         "sample_answer": "Use STAR method: Situation, Task, Action, Result."},
    ],
}

FALLBACK_RECOMMENDATIONS = [
    {
        "title": "Software Developer",
        "match_score": 85,
        "why_it_fits": "Your technical skills and problem-solving abilities make you an excellent fit for software development.",
        "required_skills": ["Programming", "Problem Solving", "Git", "Algorithms", "Testing"],
        "skill_roadmap": "Step 1: Master a programming language\nStep 2: Learn data structures\nStep 3: Build projects\nStep 4: Contribute to open source\nStep 5: Practice interviews",
        "salary_range": "$60,000 - $120,000 per year",
        "future_scope": "Excellent growth with high demand globally.",
        "tools": ["VS Code", "Git", "Docker", "AWS"],
    },
    {
        "title": "Full Stack Developer",
        "match_score": 80,
        "why_it_fits": "Your versatility makes you perfect for full-stack development.",
        "required_skills": ["JavaScript", "Node.js", "React", "MongoDB", "REST APIs"],
        "skill_roadmap": "Step 1: Learn frontend\nStep 2: Learn backend\nStep 3: Master databases\nStep 4: Build full apps\nStep 5: Deploy to cloud",
        "salary_range": "$70,000 - $130,000 per year",
        "future_scope": "Very high demand with excellent salary growth.",
        "tools": ["React", "Node.js", "MongoDB", "Docker"],
    },
    {
        "title": "Data Analyst",
        "match_score": 75,
        "why_it_fits": "Your analytical skills are perfect for data analysis roles.",
        "required_skills": ["SQL", "Excel", "Python", "Data Visualization", "Statistics"],
        "skill_roadmap": "Step 1: Master SQL\nStep 2: Learn Excel\nStep 3: Study Python\nStep 4: Learn visualization\nStep 5: Build portfolio",
        "salary_range": "$55,000 - $95,000 per year",
        "future_scope": "Growing importance as companies become data-driven.",
        "tools": ["Excel", "SQL", "Python", "Tableau"],
    },
    {
        "title": "Frontend Developer",
        "match_score": 78,
        "why_it_fits": "Your design sense and technical skills are ideal for frontend work.",
        "required_skills": ["JavaScript", "React", "HTML5", "CSS3", "TypeScript"],
        "skill_roadmap": "Step 1: Master JavaScript\nStep 2: Learn React\nStep 3: Study CSS frameworks\nStep 4: Build websites\nStep 5: Learn TypeScript",
        "salary_range": "$60,000 - $120,000 per year",
        "future_scope": "Strong demand with remote opportunities.",
        "tools": ["VS Code", "React", "Git", "Figma"],
    },
    {
        "title": "DevOps Engineer",
        "match_score": 72,
        "why_it_fits": "Your technical depth makes you suitable for DevOps roles.",
        "required_skills": ["Linux", "Docker", "Kubernetes", "CI/CD", "AWS"],
        "skill_roadmap": "Step 1: Learn Linux\nStep 2: Master Docker\nStep 3: Study Kubernetes\nStep 4: Learn CI/CD\nStep 5: Get certified",
        "salary_range": "$75,000 - $140,000 per year",
        "future_scope": "Critical role with growing demand.",
        "tools": ["Docker", "Kubernetes", "Jenkins", "AWS"],
    },
]

FALLBACK_RESUME_ANALYSIS = {
    "score": 70,
    "feedback": "Your resume has been analyzed. Consider adding more quantifiable achievements and relevant keywords for better ATS optimization.",
    "areas_for_improvement": [
        "Add specific metrics and numbers to achievements",
        "Include more industry-relevant keywords",
        "Strengthen the professional summary section",
    ],
    "strengths": [
        "Clear formatting and structure",
        "Relevant work experience listed",
        "Educational background provided",
    ],
    "keywords_found": ["experience", "skills", "education", "projects", "technical"],
}

CHAT_APOLOGY = (
    "I apologize, but I encountered an error. Please try again or rephrase your question."
)

_EXAMPLES_RE = re.compile(r"example|instance|experience|project|case", re.IGNORECASE)
_TECHNICAL_RE = re.compile(r"code|algorithm|data|system|api|database|framework", re.IGNORECASE)
_NUMBERS_RE = re.compile(r"\d+")
_SPECIFICS_RE = re.compile(r"specific|particular|exactly|precisely", re.IGNORECASE)


def fallback_questions(role: str, count: int) -> list[dict[str, str]]:
    bank = FALLBACK_QUESTIONS["General"]
    lowered = (role or "").lower()
    for key, questions in FALLBACK_QUESTIONS.items():
        if key.lower() in lowered:
            bank = questions
            break
    return [dict(bank[i % len(bank)]) for i in range(max(count, 0))]


def fallback_evaluation(answer: str) -> dict:
    """Score an answer from its length and a few keyword signals."""
    words = len((answer or "").split())
    if words < 20:
        scores = dict(communication=5, technical=5, clarity=5, confidence=5, correctness=5)
    elif words < 50:
        scores = dict(communication=6, technical=6, clarity=7, confidence=6, correctness=6)
    elif words >= 100:
        scores = dict(communication=8, technical=7, clarity=8, confidence=7, correctness=8)
    else:
        scores = dict(communication=7, technical=7, clarity=7, confidence=7, correctness=7)

    has_examples = bool(_EXAMPLES_RE.search(answer or ""))
    if has_examples:
        scores["communication"] = min(10, scores["communication"] + 1)
    if _TECHNICAL_RE.search(answer or ""):
        scores["technical"] = min(10, scores["technical"] + 1)
    if _NUMBERS_RE.search(answer or ""):
        scores["correctness"] = min(10, scores["correctness"] + 1)
    if _SPECIFICS_RE.search(answer or ""):
        scores["clarity"] = min(10, scores["clarity"] + 1)

    short = words < 50
    return {
        **scores,
        "feedback": (
            "Your answer is concise but could be more detailed. Consider adding specific examples and technical details to strengthen your response."
            if short
            else "Good answer that demonstrates understanding. You've provided relevant information. Adding specific examples with measurable results would make it even stronger."
        ),
        "suggestions": [
            "Include specific examples from your experience",
            "Add quantifiable results or metrics where possible",
            "Mention relevant tools or technologies you've used",
            "Expand on your answer with more detail" if short else "Consider using the STAR method for behavioral questions",
        ],
        "strengths": [
            "Addresses the question directly",
            "Includes relevant examples" if has_examples else "Clear communication",
            "Concise response" if short else "Good level of detail",
        ],
    }
