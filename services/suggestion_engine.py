import re
from typing import Dict, List, Optional
from models.resume_models import Priority, Suggestion, SuggestionType
import logging

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class SuggestionEngine:
    def __init__(self):
        # Expected keywords per target role, matched case-insensitively
        self.role_keywords: Dict[str, List[str]] = {
            'software engineer': ['JavaScript', 'Python', 'React', 'Node.js', 'API', 'Git', 'Agile'],
            'data scientist': ['Python', 'R', 'Machine Learning', 'SQL', 'Statistics', 'TensorFlow'],
            'research scientist': ['Research', 'Publications', 'Statistical Analysis',
                                   'Data Analysis', 'Methodology'],
            'product manager': ['Product Strategy', 'Roadmap', 'Stakeholder Management',
                                'Analytics', 'User Research'],
            'default': ['Leadership', 'Problem Solving', 'Communication', 'Teamwork',
                        'Project Management'],
        }

        self.content_indicators = {
            'quantified': re.compile(r'\d+%|\d+\+|\$\d+|increased|improved|reduced', re.IGNORECASE),
            'action_verbs': re.compile(r'led|managed|developed|created|implemented|designed|optimized',
                                       re.IGNORECASE),
        }

        self.min_word_count = 200
        self.min_summary_chars = 100
        self.max_listed_keywords = 5
        self.summary_sections = ('summary', 'professional-summary')
        self.skills_sections = ('skills', 'technical-skills')

    def generate_suggestions(self, text: str, role: str = "", area: str = "",
                             section: Optional[str] = None) -> List[Suggestion]:
        """
        Run every content check against the resume text and return the
        resulting suggestions. Never raises; bad input only means fewer
        suggestions.
        """
        text = text or ""
        role = (role or "").strip()

        suggestions = []
        for check in (self.check_length, self.check_quantification, self.check_action_verbs):
            suggestion = check(text, section)
            if suggestion:
                suggestions.append(suggestion)

        keyword_suggestion = self.check_keywords(text, role)
        if keyword_suggestion:
            suggestions.append(keyword_suggestion)

        if section:
            suggestions.extend(self.section_suggestions(section, text, role))

        logger.debug(f"Generated {len(suggestions)} suggestions for role={role!r} area={area!r}")
        return suggestions

    def check_length(self, text: str, section: Optional[str]) -> Optional[Suggestion]:
        """Flag resumes too short to show real accomplishments"""
        if len(text.split()) >= self.min_word_count:
            return None
        return Suggestion(
            id='word-count',
            type=SuggestionType.CONTENT,
            section=section or 'overall',
            priority=Priority.HIGH,
            title='Expand Content',
            description='Your resume is too brief. Add more detailed achievements.',
            suggestion_text='Add 2-3 more bullet points with specific accomplishments and metrics.',
        )

    def check_quantification(self, text: str, section: Optional[str]) -> Optional[Suggestion]:
        if self.content_indicators['quantified'].search(text):
            return None
        return Suggestion(
            id='quantify',
            type=SuggestionType.CONTENT,
            section=section or 'experience',
            priority=Priority.HIGH,
            title='Add Quantified Results',
            description='Include specific numbers and percentages to show impact.',
            suggestion_text='Replace generic statements with metrics like "Increased efficiency by 40%" '
                            'or "Managed team of 5+".',
        )

    def check_action_verbs(self, text: str, section: Optional[str]) -> Optional[Suggestion]:
        if self.content_indicators['action_verbs'].search(text):
            return None
        return Suggestion(
            id='action-verbs',
            type=SuggestionType.CONTENT,
            section=section or 'experience',
            priority=Priority.MEDIUM,
            title='Use Strong Action Verbs',
            description='Start bullet points with powerful action verbs.',
            suggestion_text='Begin achievements with words like: Led, Architected, Optimized, '
                            'Implemented, Designed.',
        )

    def keywords_for_role(self, role: str) -> List[str]:
        """Return the keyword profile for a role, falling back to the default profile"""
        return self.role_keywords.get(role.lower(), self.role_keywords['default'])

    def missing_keywords(self, text: str, role: str) -> List[str]:
        text_lower = text.lower()
        return [keyword for keyword in self.keywords_for_role(role)
                if keyword.lower() not in text_lower]

    def check_keywords(self, text: str, role: str) -> Optional[Suggestion]:
        if not role:
            return None
        missing = self.missing_keywords(text, role)
        if not missing:
            return None
        return Suggestion(
            id='keywords',
            type=SuggestionType.KEYWORD,
            section='skills',
            priority=Priority.HIGH,
            title=f'Add {role} Keywords',
            description=f'Missing key terms for {role} positions.',
            suggestion_text=f"Consider adding: {', '.join(missing[:self.max_listed_keywords])}",
        )

    def section_suggestions(self, section: str, text: str, role: str) -> List[Suggestion]:
        suggestions = []

        if section in self.summary_sections and len(text) < self.min_summary_chars:
            suggestions.append(Suggestion(
                id='summary-expand',
                type=SuggestionType.CONTENT,
                section='summary',
                priority=Priority.HIGH,
                title='Expand Professional Summary',
                description='Your summary should be 2-3 sentences highlighting key achievements.',
                suggestion_text=f'Write a compelling summary mentioning your {role} experience '
                                f'and key accomplishments.',
            ))

        if section in self.skills_sections and '•' not in text and '-' not in text:
            suggestions.append(Suggestion(
                id='skills-format',
                type=SuggestionType.FORMAT,
                section='skills',
                priority=Priority.MEDIUM,
                title='Format Skills Section',
                description='Use bullet points to organize your skills.',
                suggestion_text='Organize skills into categories with bullet points for better readability.',
            ))

        return suggestions


def mark_applied(suggestions: List[Suggestion], suggestion_id: str) -> List[Suggestion]:
    """Return a copy of the list with the matching suggestion flagged as applied"""
    return [s.model_copy(update={'applied': True}) if s.id == suggestion_id else s
            for s in suggestions]


def sort_by_priority(suggestions: List[Suggestion]) -> List[Suggestion]:
    """Stable sort, high priority first"""
    return sorted(suggestions, key=lambda s: PRIORITY_ORDER[s.priority])
