TECHNICAL_SKILLS = (
    "React", "Vue", "Angular", "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "PHP",
    "Ruby", "Go", "Rust", "Swift", "Kotlin", "HTML", "CSS", "SCSS", "SASS", "Bootstrap",
    "Tailwind", "Node.js", "Express", "Django", "Flask", "Spring", "ASP.NET", "Laravel",
    "MongoDB", "PostgreSQL", "MySQL", "Redis", "GraphQL", "REST", "API", "AWS", "Azure",
    "GCP", "Docker", "Kubernetes", "Jenkins", "CI/CD", "Git", "GitHub", "GitLab", "Jira",
    "Redux", "MobX", "Vuex", "NextJS", "NuxtJS", "Webpack", "Vite", "Rollup", "Jest",
    "Cypress", "Selenium", "Testing", "TDD", "BDD", "Microservices", "Machine Learning",
    "AI", "Data Science", "Blockchain", "DevOps", "Linux", "Windows", "macOS",
)

SOFT_SKILLS = (
    "Leadership", "Communication", "Teamwork", "Problem Solving", "Critical Thinking",
    "Creativity", "Adaptability", "Time Management", "Project Management", "Collaboration",
    "Mentoring", "Training", "Presentation", "Public Speaking", "Negotiation", "Conflict Resolution",
    "Analytical", "Detail Oriented", "Organized", "Self Motivated", "Initiative", "Innovation",
)

TOOLS = (
    "Visual Studio Code", "IntelliJ", "Eclipse", "Sublime Text", "Atom", "Vim", "Emacs",
    "Postman", "Insomnia", "Figma", "Sketch", "Adobe XD", "Photoshop", "Illustrator",
    "Slack", "Microsoft Teams", "Zoom", "Trello", "Asana", "Notion", "Confluence",
    "Bitbucket", "SourceTree", "Terminal", "Bash", "PowerShell", "Chrome DevTools",
)

# Phrases that signal hands-on proficiency when they precede a skill in the same clause
PROFICIENCY_PHRASES = (
    "expert in", "experienced with", "proficient in", "skilled in", "years of",
    "worked with", "developed using", "built with", "specializes in", "expertise in",
)

EXPERIENCE_KEYWORDS = ("experience", "work", "employment", "career")
EDUCATION_KEYWORDS = ("education", "academic", "degree", "university", "college")

SECTION_HEADERS = ("experience", "education", "skills", "projects", "certifications", "awards")

IMPORTANT_SOFT_SKILLS = ("leadership", "communication", "teamwork", "collaboration")
TESTING_SKILLS = ("jest", "testing", "cypress", "selenium")
CRITICAL_SKILLS = ("react", "typescript", "javascript")
