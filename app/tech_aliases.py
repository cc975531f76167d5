# app/tech_aliases.py
# Alias table for technology matching, keyed by technology slug (or lowercased name).
# Data only: adding an alias needs no change to the matcher.

TECH_ALIASES = {
    "javascript": ["js", "javascript", "ecmascript"],
    "typescript": ["ts", "typescript"],
    "react": ["react", "reactjs", "react.js"],
    "node.js": ["node", "nodejs", "node.js"],
    "next.js": ["next", "nextjs", "next.js"],
    "vue": ["vue", "vuejs", "vue.js"],
    "angular": ["angular", "angularjs"],
    "python": ["python", "python3"],
    "ruby": ["ruby"],
    "rails": ["rails", "ruby on rails", "ror"],
    "postgresql": ["postgres", "postgresql", "psql"],
    "mongodb": ["mongo", "mongodb"],
    "redis": ["redis"],
    "docker": ["docker", "containerization"],
    "kubernetes": ["kubernetes", "k8s"],
    "aws": ["aws", "amazon web services"],
    "gcp": ["gcp", "google cloud", "google cloud platform"],
    "azure": ["azure", "microsoft azure"],
    "terraform": ["terraform", "tf"],
    "graphql": ["graphql", "gql"],
    "rest": ["rest api", "restful"],
    "git": ["git"],
    "github": ["github"],
    "gitlab": ["gitlab"],
    "ci/cd": ["ci/cd", "cicd", "continuous integration", "continuous deployment"],
    "machine learning": ["machine learning", "ml"],
    "artificial intelligence": ["ai", "artificial intelligence"],
    "deep learning": ["deep learning", "dl"],
    "llm": ["llm", "large language model"],
    "c#": ["c#", "csharp", "c-sharp"],
    "c++": ["c++", "cpp"],
    ".net": [".net", "dotnet", ".net core"],
    "java": ["java"],
    "spring": ["spring", "spring boot"],
    "go": ["golang", "go lang"],
    "rust": ["rust"],
    "swift": ["swift"],
    "kotlin": ["kotlin"],
    "flutter": ["flutter"],
    "react native": ["react native", "react-native"],
    "electron": ["electron", "electronjs"],
    "tailwind": ["tailwind", "tailwindcss"],
    "sass": ["sass", "scss"],
    "webpack": ["webpack"],
    "vite": ["vite", "vitejs"],
    "elasticsearch": ["elasticsearch", "elastic search", "es"],
    "rabbitmq": ["rabbitmq", "rabbit mq"],
    "kafka": ["kafka", "apache kafka"],
}

# display names for seeding a fresh technologies table
SEED_NAMES = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "react": "React",
    "node.js": "Node.js",
    "next.js": "Next.js",
    "vue": "Vue",
    "angular": "Angular",
    "python": "Python",
    "ruby": "Ruby",
    "rails": "Rails",
    "postgresql": "PostgreSQL",
    "mongodb": "MongoDB",
    "redis": "Redis",
    "docker": "Docker",
    "kubernetes": "Kubernetes",
    "aws": "AWS",
    "gcp": "GCP",
    "azure": "Azure",
    "terraform": "Terraform",
    "graphql": "GraphQL",
    "rest": "REST",
    "git": "Git",
    "github": "GitHub",
    "gitlab": "GitLab",
    "ci/cd": "CI/CD",
    "machine learning": "Machine Learning",
    "artificial intelligence": "Artificial Intelligence",
    "deep learning": "Deep Learning",
    "llm": "LLM",
    "c#": "C#",
    "c++": "C++",
    ".net": ".NET",
    "java": "Java",
    "spring": "Spring",
    "go": "Go",
    "rust": "Rust",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "flutter": "Flutter",
    "react native": "React Native",
    "electron": "Electron",
    "tailwind": "Tailwind",
    "sass": "Sass",
    "webpack": "Webpack",
    "vite": "Vite",
    "elasticsearch": "Elasticsearch",
    "rabbitmq": "RabbitMQ",
    "kafka": "Kafka",
}
