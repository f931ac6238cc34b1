import re
from typing import List

from models.resume_models import ResumeSection

_HEADER = re.compile(r'^[A-Z\s]+$')


def is_section_header(line: str) -> bool:
    """Upper-case line longer than three characters with no '|' or '@'"""
    return bool(_HEADER.match(line)) and len(line) > 3 and '|' not in line and '@' not in line


def section_id(title: str) -> str:
    return re.sub(r'\s+', '-', title.lower())


def default_sections() -> List[ResumeSection]:
    """Skeleton used when no headers can be found"""
    return [
        ResumeSection(id='header', title='Header', content='JOHN DOE\nSoftware Engineer'),
        ResumeSection(id='summary', title='Professional Summary', content='Experienced professional with...'),
        ResumeSection(id='skills', title='Technical Skills', content='• Skill 1\n• Skill 2\n• Skill 3'),
        ResumeSection(id='experience', title='Professional Experience',
                      content='Job Title | Company | Dates\n• Achievement 1\n• Achievement 2'),
        ResumeSection(id='education', title='Education', content='Degree | University | Year'),
    ]


def parse_sections(text: str) -> List[ResumeSection]:
    """
    Split resume text into sections at header lines. Text before the first
    header is dropped, as are headers with no content under them.
    """
    sections = []
    current_title = ''
    current_lines: List[str] = []

    def flush():
        if current_title and current_lines:
            sections.append(ResumeSection(
                id=section_id(current_title),
                title=current_title,
                content='\n'.join(current_lines).rstrip('\n'),
            ))

    for raw_line in (text or '').split('\n'):
        line = raw_line.strip()
        if is_section_header(line):
            flush()
            current_title = line
            current_lines = []
        elif line:
            current_lines.append(line)
        elif current_lines:
            current_lines.append('')

    flush()
    return sections or default_sections()
