"""Shared test configuration, pytest markers and fixtures."""

import pytest

from models.schemas.candidate import CandidateProfile
from services.nlp.entity_recognizer import EntityRecognizer


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: builds the spaCy entity recognizer (slower)"
    )


REQUIREMENTS_TEXT = """Обязательные требования: ОПЫТ РАБОТЫ В ФИНТЕХЕ; Знание теоретических основ тестирования программного обеспечения;
Понимание принципов функционирования протокола HTTP и особенностей архитектуры REST;
Представление о принципах асинхронного обмена сообщениями с использованием очередей (Message Queues, MQ);
Базовые навыки работы с языком запросов SQL; Основы объектно-ориентированного программирования (ООП);
Опыт работы с инструментами для отправки и проверки HTTP-запросов (Postman, Swagger).
Дополнительные требования: Знание и понимание микросервисной архитектуры приложения;
Описание проекта и команды: Проект для крупного банка. Работают в Agile процессах.
Технологический стек: Java, Spring Boot, ActiveMQ Artemis, Kafka, PostgreSQL.
Опыт работы от 5 лет."""

SAMPLE_REQUEST = f"""CV - QA Automation Engineer - Java - Acme Bank - Ivan Petrov - R-12345
https://acme.my.salesforce.com/lightning/r/Opportunity/006ABC123DEF456GH/view
Описание
Проект для крупного банка, нужен автоматизатор.
1. Индустрия проекта
Banking
6. Уровень разработчиков
Senior+, Lead
8. Min уровень английского языка
B2+
10. Дополнительный язык
German
11. Min уровень дополнительного языка
B1
12. Запрошенное количество сотрудников
2
13. Рабочие часы
10:00-19:00 MSK
14. Подробные требования к разработчику
{REQUIREMENTS_TEXT}
17. Длительность сотрудничества
6 months
20. Срок отправки заказчику
2025-03-15
22. Сейлс менеджер
Ivan Petrov
24. Требуемая локация специалиста (-ов)
РФ, РБ, Remote
31. Проектный координатор
Anna Smirnova
"""


@pytest.fixture(scope="session")
def recognizer() -> EntityRecognizer:
    """One trained recognizer for the whole run; training is the slow part."""
    rec = EntityRecognizer()
    rec.train()
    return rec


@pytest.fixture
def sample_request() -> str:
    return SAMPLE_REQUEST


@pytest.fixture
def requirements_text() -> str:
    return REQUIREMENTS_TEXT


@pytest.fixture
def candidates() -> list[CandidateProfile]:
    return [
        CandidateProfile.from_record({
            "id": "c1", "Name": "Olga Senior", "Grade": "Senior", "Role": "QA Automation",
            "Country": "Russia", "City": "Moscow", "English": "C1", "Java": "High", "Python": "Low",
        }),
        CandidateProfile.from_record({
            "id": "c2", "Name": "Pavel Middle", "Grade": "Middle", "Role": "QA Manual",
            "Country": "Belarus", "City": "Minsk", "English": "B1", "Java": "No",
        }),
        CandidateProfile.from_record({
            "id": "c3", "Name": "Anna Junior", "Grade": "Junior", "Role": "QA Automation",
            "Country": "Germany", "City": "Berlin", "English": "B2", "German": "Native", "Python": "Medium",
        }),
        CandidateProfile.from_record({
            "id": "c4", "Name": "Ivan Intern", "Grade": "Intern", "Role": "QA",
            "Country": "Georgia", "City": "Tbilisi", "English": "A2",
        }),
    ]
