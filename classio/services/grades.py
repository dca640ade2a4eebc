# classio/services/grades.py
import zlib
from collections import OrderedDict
from typing import Iterable, List

from classio.schemas.grade import Grade, SubjectGradeStats

# ARGB, порядок важен: цвет предмета = palette[crc32(id) % len(palette)]
SUBJECT_PALETTE = (
    0xFF2196F3,  # Blue
    0xFFFF5722,  # Deep Orange
    0xFF4CAF50,  # Green
    0xFF9C27B0,  # Purple
    0xFF009688,  # Teal
    0xFFF44336,  # Red
    0xFF3F51B5,  # Indigo
    0xFFFFC107,  # Amber
    0xFF00BCD4,  # Cyan
    0xFFE91E63,  # Pink
    0xFFCDDC39,  # Lime
    0xFF795548,  # Brown
    0xFF673AB7,  # Deep Purple
    0xFF03A9F4,  # Light Blue
    0xFFFF9800,  # Orange
)


def subject_color(subject_id) -> int:
    # crc32, а не hash(): hash() для строк меняется между запусками
    digest = zlib.crc32(str(subject_id).encode("utf-8"))
    return SUBJECT_PALETTE[digest % len(SUBJECT_PALETTE)]


def weighted_average(grades: Iterable[Grade]) -> float:
    total_score = 0.0
    total_weight = 0.0
    for grade in grades:
        if grade.weight <= 0:
            continue
        total_score += grade.score * grade.weight
        total_weight += grade.weight
    if total_weight <= 0:
        return 0.0
    return total_score / total_weight


def aggregate(grades: Iterable[Grade], subject_name: str, subject_id) -> SubjectGradeStats:
    grades = list(grades)
    return SubjectGradeStats(
        subject_id=subject_id,
        subject_name=subject_name,
        subject_color=subject_color(subject_id),
        average=weighted_average(grades),
        grades=grades,
    )


def grade_from_row(row) -> Grade:
    """Строка из таблицы grades → Grade. Описание: тип оценки, иначе комментарий."""
    return Grade(
        id=row.id,
        subject_id=row.subject_id,
        score=float(row.score),
        weight=float(row.weight) if row.weight is not None else 1.0,
        description=row.grade_type or row.comment or "Grade",
        date=row.created_at,
    )


def aggregate_by_subject(rows) -> List[SubjectGradeStats]:
    """
    Группирует оценки по предметам.

    rows: пары (Grade, имя предмета) в порядке выборки; порядок оценок
    внутри предмета сохраняется. Результат отсортирован по имени предмета.
    """
    by_subject = OrderedDict()
    names = {}
    for grade, subject_name in rows:
        by_subject.setdefault(grade.subject_id, []).append(grade)
        names[grade.subject_id] = subject_name or "Unknown Subject"

    stats = [
        aggregate(grades, names[subject_id], subject_id)
        for subject_id, grades in by_subject.items()
    ]
    stats.sort(key=lambda s: s.subject_name)
    return stats
