"""
Default skill taxonomy - the seed loaded into the skills_taxonomy table.

Each entry is a canonical skill: slug, aliases (case-insensitivity is handled
by the matcher), kind and weight. Run scripts/seed_taxonomy.py to load it.
"""

from hireboard.models.ats import CanonicalSkill


DEFAULT_SKILLS = [
    # --- Languages ---
    CanonicalSkill("python", ("Python3",), "skill"),
    CanonicalSkill("java", ("Java SE", "Core Java"), "skill"),
    CanonicalSkill("javascript", ("JS", "ECMAScript", "ES6"), "skill"),
    CanonicalSkill("typescript", (), "skill"),
    CanonicalSkill("c++", ("cpp",), "skill"),
    CanonicalSkill("c#", ("csharp",), "skill"),
    CanonicalSkill("golang", (), "skill"),
    CanonicalSkill("sql", ("PostgreSQL", "Postgres", "MySQL", "MSSQL", "SQLite"), "skill"),

    # --- Frameworks / libraries ---
    CanonicalSkill("react", ("React.js", "ReactJS"), "skill"),
    CanonicalSkill("node.js", ("NodeJS",), "skill"),
    CanonicalSkill("django", (), "skill"),
    CanonicalSkill("flask", (), "skill"),
    CanonicalSkill("fastapi", ("Fast API",), "skill"),
    CanonicalSkill(".net", ("dotnet", "ASP.NET"), "skill"),
    CanonicalSkill("tensorflow", (), "skill"),
    CanonicalSkill("pytorch", (), "skill"),
    CanonicalSkill("scikit-learn", ("sklearn",), "skill"),
    CanonicalSkill("pandas", (), "skill"),
    CanonicalSkill("numpy", (), "skill"),
    CanonicalSkill("restful apis", ("REST API", "REST APIs", "RESTful API"), "skill"),

    # --- Concepts ---
    CanonicalSkill("machine learning", ("ML",), "skill"),
    CanonicalSkill("artificial intelligence", ("AI",), "skill"),
    CanonicalSkill("data analysis", ("Data Analytics",), "skill"),
    CanonicalSkill("ci/cd", ("Continuous Integration", "Continuous Deployment"), "skill"),
    CanonicalSkill("agile", ("Agile Methodology",), "skill", 0.5),
    CanonicalSkill("scrum", (), "skill", 0.5),

    # --- Tools ---
    CanonicalSkill("git", ("GitHub", "GitLab"), "tool"),
    CanonicalSkill("docker", (), "tool"),
    CanonicalSkill("kubernetes", ("K8s",), "tool"),
    CanonicalSkill("jenkins", (), "tool"),
    CanonicalSkill("redis", (), "tool"),
    CanonicalSkill("jira", ("Atlassian JIRA",), "tool"),
    CanonicalSkill("tableau", (), "tool"),
    CanonicalSkill("power bi", ("PowerBI",), "tool"),
    CanonicalSkill("excel", ("Microsoft Excel", "MS Excel"), "tool"),

    # --- Platforms ---
    CanonicalSkill("aws", ("Amazon Web Services",), "platform"),
    CanonicalSkill("azure", ("Microsoft Azure",), "platform"),
    CanonicalSkill("gcp", ("Google Cloud Platform", "Google Cloud"), "platform"),
    CanonicalSkill("linux", ("Ubuntu",), "platform"),

    # --- Certifications ---
    CanonicalSkill("aws certified", ("AWS Certified Solutions Architect", "AWS Certified Developer"), "cert"),
    CanonicalSkill("pmp", ("Project Management Professional",), "cert"),
    CanonicalSkill("prince2", (), "cert"),
    CanonicalSkill("itil", (), "cert"),
    CanonicalSkill("cka", ("Certified Kubernetes Administrator",), "cert"),

    # --- Soft skills ---
    CanonicalSkill("leadership", ("Team Leadership",), "soft", 0.5),
    CanonicalSkill("communication", ("Communication Skills",), "soft", 0.5),
    CanonicalSkill("stakeholder management", ("Stakeholder Communication",), "soft", 0.5),
    CanonicalSkill("problem solving", ("Problem-solving",), "soft", 0.5),
]
