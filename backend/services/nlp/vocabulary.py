"""Closed entity vocabularies for staffing / QA requests.

Each entity type maps sub-category -> surface forms. Surface forms are the
canonical names unless ``CANONICAL_ALIASES`` redirects them.
"""

TECHNOLOGIES: dict[str, list[str]] = {
    "languages": [
        "Java", "C#", "C++", "Python", "JavaScript", "TypeScript", "Go", "Kotlin",
        "Swift", "Groovy", "Delphi", "PL/SQL",
    ],
    "frameworks": [
        "Spring", "Spring Boot", "Micronaut", "GraalVM", "Node.js", "React", "Angular", "Vue.js",
        "JUnit", "TestNG", "PyTest", "Robot Framework", "Selenide", "Cucumber", "Selenium",
        "Appium", "Cypress", "CodeceptJS", "Jest", "Mocha", "Chai", "Allure Reports",
        "RestAssured", "Wiremock", "TestComplete", "Testomat", "Playwright",
    ],
    "databases": [
        "PostgreSQL", "MySQL", "MS SQL", "MongoDB", "Redis", "NoSQL", "DB2", "InfluxDB",
    ],
    "cloud_and_devops": [
        "AWS", "AWS RDS", "AWS EKS", "Azure DevOps", "Google Cloud Platform", "GCP",
        "Jenkins", "GitHub Actions", "GitLab CI/CD", "GitLab", "Bamboo", "Bitbucket",
        "GitlabCI", "Openshift", "Helm", "Terraform", "CloudFormation", "Docker",
        "Kubernetes", "VMware Horizon", "OpenStack", "Hazelcast", "Prometheus", "Grafana",
        "Octopus",
    ],
    "messaging_and_integration": [
        "Kafka", "RabbitMQ", "ActiveMQ", "ActiveMQ Artemis", "JMS", "Mulesoft",
        "Service Workers", "GRPC", "WebSocket", "OpenLens", "OpenSearch",
    ],
    "testing_tools": [
        "Postman", "Insomnia", "SoapUI", "JMeter", "ArtilleryIO", "Artillery", "Locust",
        "SuperTest", "Fiddler", "Charles Proxy", "Charles", "Swagger", "TestRail", "Zephyr",
        "Linear", "Apptimized",
    ],
    "bi_and_reporting": [
        "Power BI", "QuickSight", "SharePoint", "Databricks", "Confluence", "Amplitude",
        "Appsflyer", "AppMetrica", "Mosaic Orchestrator", "Powercloud", "Float", "Tempo",
    ],
    "dev_tools": [
        "Visual Studio Code", "IntelliJ IDEA", "Android Studio", "PLSQL Developer",
        "Direct Oracle Access", "Developer Express Suite", "xCode", "Miro", "Figma",
    ],
    "automation_and_office": [
        "Automation Anywhere", "UIPath", "SikuliX", "AutoHotkey", "Microsoft Power Automate",
        "MSI", "MSIX", "App-V", "Intune",
    ],
    "network_and_security": [
        "Wireshark", "Metasploit", "Burp Suite", "Nmap", "OAuth", "SAML", "Active Directory",
        "SyHunt", "SAP", "SAP GRC", "SAP IDM", "Citrix",
    ],
    "cms": ["Drupal", "Magento", "Umbraco"],
    "other": [
        "Chrome DevTools", "BeautifulSoup", "lxml", "Puppeteer", "YAML", "XML Tools", "Gherkin",
        "Studio", "OpenAI", "Adaptavist", "Trino", "Airflow",
    ],
}

PLATFORMS: dict[str, list[str]] = {
    "desktop_os": ["Windows", "Linux", "macOS", "Unix"],
    "mobile_os": ["iOS", "Android", "Mobile"],
    "gaming_consoles": ["Xbox", "PlayStation", "PS4", "PS5", "Nintendo Switch"],
    "web": ["Web"],
    "hardware": ["PC", "Mac", "Raspberry Pi"],
    "enterprise": ["Mainframe", "z/OS", "VDI"],
}

SKILLS: dict[str, list[str]] = {
    "testing_types": [
        "Functional Testing", "Non-functional testing", "Performance Testing",
        "Security Testing", "Penetration Testing", "Vulnerability Assessment",
        "Regression Testing", "Localization Testing", "Тестирование локализации",
        "Mainframe Testing", "Тестирование мейнфреймов", "UAT", "Smoke testing",
        "UI Testing", "API Testing", "Backend Testing", "Тестирование Backend",
        "Frontend Testing", "Фронтенд-тестирование", "DB Testing", "Тестирование БД",
        "Unit Testing", "E2E Testing", "Exploratory Testing", "Continuous Testing",
        "Greybox Testing", "Black-box testing", "Desktop Application Testing",
        "Тестирование десктопных приложений", "Мобильное тестирование",
    ],
    "methodologies_and_processes": [
        "Agile", "Scrum", "Agile QA", "Sprint Testing", "BDD", "TDD", "OOP", "ООП",
        "Risk-based testing", "Тестирование на основе рисков", "Shift Left Testing",
        "QA Process", "QA Strategy", "QA Methodologies", "SDLC", "Development Lifecycle",
        "ISTQB",
    ],
    "automation_and_infra": [
        "Test Automation", "CI/CD", "IaC", "Infrastructure as Code", "Automation Roadmap",
        "Automation Patterns", "Паттерны автоматизации",
    ],
    "architecture_and_design": [
        "Microservices", "Микросервисы", "DDD", "CQRS", "Event Sourcing", "Test Architecture",
    ],
    "data_and_db": [
        "SQL", "DML", "Relational Databases", "Реляционные СУБД", "Data Contracts", "EDIFACT",
    ],
    "management_and_analysis": [
        "Test coordination", "Test Management", "Defect Tracking", "RCA", "Test Design",
        "Техники тест-дизайна", "Test Specifications", "Acceptance Criteria",
        "Business Requirements", "Анализ спецификаций", "Тестовая документация",
    ],
    "technical_skills": [
        "REST API", "REST", "GraphQL", "HTTP", "API Integration", "Message Queues", "MQ",
        "Message Brokers", "XSS", "SQLi", "Scraping", "GUI Automation", "DOM Navigation",
        "XPath", "CSS Selectors", "Software Packaging", "Linting", "Mess Detection",
        "Bug fixing", "Отладка", "Debugging", "Mock Services", "Мок-сервисы",
        "Cross-platform compatibility", "Кросс-платформенная совместимость", "Code Review",
    ],
    "ai_and_ml": [
        "Machine Learning", "ML", "LLM", "LLM prompt engineering", "Bias detection",
        "Data Validation", "Predictive Modeling", "Sentiment Analysis",
    ],
    "other": ["IT Asset Management", "MDM", "IT Security", "Mentoring"],
}

DOMAINS: dict[str, list[str]] = {
    "finance": [
        "Fintech", "Финтех", "Banking", "Банкинг", "Банк", "Trading", "Online Trading",
        "Торговые системы", "Finance", "Финансы", "Финансовые расчетные системы",
        "Investment Business", "Инвестиционный бизнес", "UK payment regulations",
    ],
    "business_models": ["B2B", "B2C", "PaaS", "SaaS", "Middleware"],
    "hr_tech": ["Skills Management", "Workforce Enablement", "HR Tech", "Future of Work"],
    "security": ["Cybersecurity", "Access Management"],
    "industries": [
        "E-commerce", "Geo Data", "Геоданные", "Pharmaceutical", "Automotive",
        "Energy industry", "Healthcare", "Gaming",
    ],
    "other": [
        "IT-Asset Management", "Mobile Device Management", "Messenger", "Business Analysis",
        "Customer Experience", "CX", "Автозаказ", "Management Simulation", "Astrology",
        "Астрология", "Generative AI",
    ],
}

ROLES: dict[str, list[str]] = {
    "development": ["Developer", "Fullstack Software Developer in Test"],
    "quality_assurance": [
        "QA Engineer", "Automation QA", "AQA", "Test Automation Engineer", "Automation Tester",
        "Manual QA", "Manual QA Engineer", "Fullstack QA", "Backend QA", "Mobile QA Tester",
        "Tester", "SDET",
    ],
    "qa_management": ["Test Lead", "Automation Infrastructure Technical Lead", "Hands-on Lead"],
    "analysis_and_specialized": [
        "Business Analyst", "Test Analyst", "Macro Specialist", "Scraper Specialist",
    ],
    "security_and_ops": ["Penetration Tester", "IT Security Specialist", "TestOps", "DevOps"],
}

# entity label -> vocabulary; labels double as PrimaryRequirements group keys
ENTITY_TYPES: dict[str, dict[str, list[str]]] = {
    "technology": TECHNOLOGIES,
    "platform": PLATFORMS,
    "skill": SKILLS,
    "domain": DOMAINS,
    "role": ROLES,
}

# Lowercased surface form -> canonical name shared with another surface form
CANONICAL_ALIASES: dict[str, str] = {
    "банк": "Banking",
    "банкинг": "Banking",
    "финтех": "Fintech",
    "ооп": "OOP",
    "rest": "REST API",
    "mq": "Message Queues",
    "микросервисы": "Microservices",
}

# Extra inflected forms the suffix rules below do not produce
EXTRA_SYNONYMS: dict[str, list[str]] = {
    "Microservices": ["микросервисной", "микросервисная", "микросервисов"],
}

# canonical name -> terms that, when present near the entity, mean it is not meant
CONFUSABLES: dict[str, list[str]] = {
    "Go": ["go-live", "go live", "to go"],
    "Linear": ["linear regression", "linear algebra", "linear scaling"],
    "Float": ["float value", "float type", "floating"],
    "Tempo": ["high tempo", "fast tempo", "tempo of work"],
    "Chai": ["chai tea", "masala chai"],
    "Studio": ["android studio", "visual studio", "recording studio"],
    "Cucumber": ["cucumber salad"],
    "Mocha": ["mocha coffee", "mocha latte"],
    "Cypress": ["cypress tree", "cypress hill"],
    "Mobile": ["mobile phone number"],
}
