"""
Technology to cloud service knowledge base.

SERVICE_MAPPINGS is keyed category -> technology -> provider and holds
tuples of Service templates. MANAGED_ALTERNATIVES maps a self-managed
service key ("category-name") to its managed replacement. Both tables are
built once at import time and exposed read-only.
"""
from typing import Any, Dict
from types import MappingProxyType

from cloudopti.domain.service_models import Service, ServiceType


SERVERLESS = ServiceType.SERVERLESS
MANAGED = ServiceType.MANAGED
TRADITIONAL = ServiceType.TRADITIONAL


# Detector display names that differ from catalog keys
TECHNOLOGY_ALIASES: MappingProxyType = MappingProxyType({
    "node.js": "javascript",
    "nodejs": "javascript",
    "node": "javascript",
    "js": "javascript",
    "ts": "typescript",
    "golang": "go",
    "c#": "csharp",
    "next.js": "nextjs",
    "next": "nextjs",
    "nuxt.js": "nuxt",
    "vue.js": "vue",
    "vuejs": "vue",
    "express.js": "express",
    "expressjs": "express",
    "spring boot": "spring",
    "spring-boot": "spring",
    "postgres": "postgresql",
    "mongo": "mongodb",
    "k8s": "kubernetes",
})


def _service(name, category, purpose, service_type, alternatives=(), cost_factors=(), **extra) -> Service:
    return Service(
        name=name,
        category=category,
        purpose=purpose,
        type=service_type,
        alternatives=tuple(alternatives),
        cost_factors=tuple(cost_factors),
        **extra
    )


# AWS
AWS_LAMBDA = _service(
    "Lambda", "compute", "Serverless function execution", SERVERLESS,
    ["EC2", "ECS", "App Runner"], ["execution time", "memory allocation", "requests"],
    serverless_alternative="Lambda",
)
AWS_APP_RUNNER = _service(
    "App Runner", "compute", "Containerized web applications", MANAGED,
    ["ECS", "EC2"], ["vCPU", "memory", "requests"],
)
AWS_ELASTIC_BEANSTALK = _service(
    "Elastic Beanstalk", "compute", "Managed web application deployment", MANAGED,
    ["EC2", "ECS"], ["EC2 instances", "load balancer", "storage"],
    supports_reserved_instances=True,
)
AWS_EC2 = _service(
    "EC2", "compute", "Self-managed virtual machines", TRADITIONAL,
    ["Elastic Beanstalk", "ECS", "Lambda"], ["instance type", "hours", "EBS storage"],
    serverless_alternative="Lambda", supports_reserved_instances=True,
)
AWS_S3_CLOUDFRONT = _service(
    "S3 + CloudFront", "hosting", "Static site hosting with CDN", MANAGED,
    ["Amplify", "EC2"], ["storage", "data transfer", "requests"],
)
AWS_AMPLIFY = _service(
    "Amplify", "hosting", "Full-stack web application hosting", MANAGED,
    ["S3 + CloudFront", "Elastic Beanstalk"], ["build minutes", "hosting", "data transfer"],
)
AWS_RDS_POSTGRESQL = _service(
    "RDS PostgreSQL", "database", "Managed PostgreSQL database", MANAGED,
    ["Aurora PostgreSQL", "EC2 self-managed"], ["instance type", "storage", "backup", "data transfer"],
    supports_reserved_instances=True,
)
AWS_AURORA_POSTGRESQL = _service(
    "Aurora PostgreSQL", "database", "High-performance PostgreSQL", MANAGED,
    ["RDS PostgreSQL"], ["ACU (serverless)", "storage", "I/O requests"],
)
AWS_RDS_MYSQL = _service(
    "RDS MySQL", "database", "Managed MySQL database", MANAGED,
    ["Aurora MySQL", "EC2 self-managed"], ["instance type", "storage", "backup", "data transfer"],
    supports_reserved_instances=True,
)
AWS_AURORA_MYSQL = _service(
    "Aurora MySQL", "database", "High-performance MySQL", MANAGED,
    ["RDS MySQL"], ["ACU (serverless)", "storage", "I/O requests"],
)
AWS_DOCUMENTDB = _service(
    "DocumentDB", "database", "MongoDB-compatible document database", MANAGED,
    ["MongoDB Atlas", "EC2 self-managed"], ["instance type", "storage", "I/O requests"],
)
AWS_ELASTICACHE = _service(
    "ElastiCache for Redis", "cache", "Managed in-memory cache", MANAGED,
    ["MemoryDB", "EC2 self-managed"], ["node type", "nodes", "data transfer"],
)
AWS_ECS_FARGATE = _service(
    "ECS on Fargate", "container", "Serverless container orchestration", MANAGED,
    ["EKS", "App Runner"], ["vCPU", "memory", "task hours"],
)
AWS_EKS = _service(
    "EKS", "container", "Managed Kubernetes control plane", MANAGED,
    ["ECS on Fargate", "EC2 self-managed"], ["cluster hours", "worker nodes", "load balancers"],
)

# Azure
AZURE_FUNCTIONS = _service(
    "Functions", "compute", "Serverless function execution", SERVERLESS,
    ["App Service", "Container Instances"], ["execution time", "memory", "requests"],
    serverless_alternative="Functions",
)
AZURE_APP_SERVICE = _service(
    "App Service", "compute", "Web application hosting", MANAGED,
    ["Container Instances", "Virtual Machines"], ["app service plan", "compute hours"],
    supports_reserved_instances=True,
)
AZURE_VIRTUAL_MACHINES = _service(
    "Virtual Machines", "compute", "Self-managed virtual machines", TRADITIONAL,
    ["App Service", "Container Apps", "Functions"], ["VM size", "hours", "managed disks"],
    serverless_alternative="Functions", supports_reserved_instances=True,
)
AZURE_CONTAINER_APPS = _service(
    "Container Apps", "compute", "Serverless containers", MANAGED,
    ["App Service", "AKS"], ["vCPU seconds", "memory", "requests"],
)
AZURE_SPRING_APPS = _service(
    "Spring Apps", "compute", "Managed Spring Boot runtime", MANAGED,
    ["App Service", "AKS"], ["vCPU", "memory", "instances"],
)
AZURE_STATIC_WEB_APPS = _service(
    "Static Web Apps", "hosting", "Static web application hosting", MANAGED,
    ["App Service", "Storage Account"], ["bandwidth", "custom domains", "functions"],
)
AZURE_POSTGRESQL = _service(
    "Database for PostgreSQL", "database", "Managed PostgreSQL service", MANAGED,
    ["Virtual Machines"], ["compute", "storage", "backup"],
    supports_reserved_instances=True,
)
AZURE_MYSQL = _service(
    "Database for MySQL", "database", "Managed MySQL service", MANAGED,
    ["Virtual Machines"], ["compute", "storage", "backup"],
    supports_reserved_instances=True,
)
AZURE_COSMOS_DB = _service(
    "Cosmos DB", "database", "Multi-model database with MongoDB API", MANAGED,
    ["Virtual Machines"], ["request units", "storage", "backup"],
)
AZURE_CACHE_FOR_REDIS = _service(
    "Cache for Redis", "cache", "Managed in-memory cache", MANAGED,
    ["Virtual Machines"], ["tier", "capacity", "data transfer"],
)
AZURE_CONTAINER_INSTANCES = _service(
    "Container Instances", "container", "On-demand containers", MANAGED,
    ["Container Apps", "AKS"], ["vCPU seconds", "memory seconds"],
)
AZURE_AKS = _service(
    "AKS", "container", "Managed Kubernetes", MANAGED,
    ["Container Apps", "Virtual Machines"], ["node pools", "load balancers", "storage"],
)

# GCP
GCP_CLOUD_FUNCTIONS = _service(
    "Cloud Functions", "compute", "Serverless function execution", SERVERLESS,
    ["Cloud Run", "Compute Engine"], ["invocations", "compute time", "memory"],
    serverless_alternative="Cloud Functions",
)
GCP_CLOUD_RUN = _service(
    "Cloud Run", "compute", "Containerized applications", MANAGED,
    ["Compute Engine", "GKE"], ["CPU", "memory", "requests"],
)
GCP_APP_ENGINE = _service(
    "App Engine", "compute", "Managed web application platform", MANAGED,
    ["Cloud Run", "Compute Engine"], ["instance hours", "requests", "bandwidth"],
)
GCP_COMPUTE_ENGINE = _service(
    "Compute Engine", "compute", "Self-managed virtual machines", TRADITIONAL,
    ["App Engine", "Cloud Run", "Cloud Functions"], ["machine type", "hours", "persistent disk"],
    serverless_alternative="Cloud Functions", supports_reserved_instances=True,
)
GCP_FIREBASE_HOSTING = _service(
    "Firebase Hosting", "hosting", "Static web application hosting", MANAGED,
    ["Cloud Storage", "App Engine"], ["storage", "bandwidth", "requests"],
)
GCP_CLOUD_RUN_HOSTING = _service(
    "Cloud Run", "hosting", "Containerized server-rendered hosting", MANAGED,
    ["App Engine", "Compute Engine"], ["CPU", "memory", "requests"],
)
GCP_CLOUD_SQL_POSTGRESQL = _service(
    "Cloud SQL PostgreSQL", "database", "Managed PostgreSQL database", MANAGED,
    ["Compute Engine self-managed"], ["CPU", "memory", "storage", "network"],
    supports_reserved_instances=True,
)
GCP_CLOUD_SQL_MYSQL = _service(
    "Cloud SQL MySQL", "database", "Managed MySQL database", MANAGED,
    ["Compute Engine self-managed"], ["CPU", "memory", "storage", "network"],
    supports_reserved_instances=True,
)
GCP_FIRESTORE = _service(
    "Firestore", "database", "NoSQL document database", MANAGED,
    ["MongoDB Atlas", "Compute Engine"], ["reads", "writes", "storage", "bandwidth"],
)
GCP_MEMORYSTORE = _service(
    "Memorystore for Redis", "cache", "Managed in-memory cache", MANAGED,
    ["Compute Engine self-managed"], ["capacity", "tier", "network"],
)
GCP_CLOUD_RUN_CONTAINER = _service(
    "Cloud Run", "container", "Serverless containers", MANAGED,
    ["GKE Autopilot", "Compute Engine"], ["CPU", "memory", "requests"],
)
GCP_GKE_AUTOPILOT = _service(
    "GKE Autopilot", "container", "Managed Kubernetes", MANAGED,
    ["Cloud Run", "Compute Engine"], ["pod resources", "cluster fee"],
)


_NODE_RUNTIME = {
    "aws": [AWS_LAMBDA, AWS_APP_RUNNER],
    "azure": [AZURE_FUNCTIONS, AZURE_APP_SERVICE],
    "gcp": [GCP_CLOUD_FUNCTIONS, GCP_CLOUD_RUN],
}

_WEB_PLATFORM = {
    "aws": [AWS_ELASTIC_BEANSTALK],
    "azure": [AZURE_APP_SERVICE],
    "gcp": [GCP_APP_ENGINE],
}

_CONTAINER_WEB = {
    "aws": [AWS_ELASTIC_BEANSTALK],
    "azure": [AZURE_APP_SERVICE],
    "gcp": [GCP_CLOUD_RUN],
}

_STATIC_SPA = {
    "aws": [AWS_S3_CLOUDFRONT, AWS_AMPLIFY],
    "azure": [AZURE_STATIC_WEB_APPS],
    "gcp": [GCP_FIREBASE_HOSTING],
}

_SSR_FRAMEWORK = {
    "aws": [AWS_AMPLIFY, AWS_S3_CLOUDFRONT],
    "azure": [AZURE_STATIC_WEB_APPS],
    "gcp": [GCP_CLOUD_RUN_HOSTING, GCP_FIREBASE_HOSTING],
}


_SERVICE_MAPPINGS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "language": {
        "javascript": _NODE_RUNTIME,
        "typescript": _NODE_RUNTIME,
        "python": {
            "aws": [AWS_LAMBDA, AWS_ELASTIC_BEANSTALK],
            "azure": [AZURE_FUNCTIONS, AZURE_APP_SERVICE],
            "gcp": [GCP_CLOUD_FUNCTIONS, GCP_APP_ENGINE],
        },
        "java": {
            "aws": [AWS_EC2],
            "azure": [AZURE_VIRTUAL_MACHINES],
            "gcp": [GCP_COMPUTE_ENGINE],
        },
        "go": {
            "aws": [AWS_LAMBDA, AWS_APP_RUNNER],
            "azure": [AZURE_FUNCTIONS, AZURE_CONTAINER_APPS],
            "gcp": [GCP_CLOUD_RUN],
        },
        "php": _WEB_PLATFORM,
        "ruby": _CONTAINER_WEB,
        "csharp": {
            "aws": [AWS_ELASTIC_BEANSTALK],
            "azure": [AZURE_APP_SERVICE, AZURE_FUNCTIONS],
            "gcp": [GCP_CLOUD_RUN],
        },
    },
    "framework": {
        "react": _STATIC_SPA,
        "vue": _STATIC_SPA,
        "angular": _STATIC_SPA,
        "nextjs": _SSR_FRAMEWORK,
        "nuxt": _SSR_FRAMEWORK,
        "express": {
            "aws": [AWS_APP_RUNNER],
            "azure": [AZURE_APP_SERVICE],
            "gcp": [GCP_CLOUD_RUN],
        },
        "django": _WEB_PLATFORM,
        "flask": _WEB_PLATFORM,
        "laravel": _CONTAINER_WEB,
        "spring": {
            "aws": [AWS_ELASTIC_BEANSTALK],
            "azure": [AZURE_SPRING_APPS],
            "gcp": [GCP_APP_ENGINE],
        },
    },
    "database": {
        "postgresql": {
            "aws": [AWS_RDS_POSTGRESQL, AWS_AURORA_POSTGRESQL],
            "azure": [AZURE_POSTGRESQL],
            "gcp": [GCP_CLOUD_SQL_POSTGRESQL],
        },
        "mysql": {
            "aws": [AWS_RDS_MYSQL, AWS_AURORA_MYSQL],
            "azure": [AZURE_MYSQL],
            "gcp": [GCP_CLOUD_SQL_MYSQL],
        },
        "mongodb": {
            "aws": [AWS_DOCUMENTDB],
            "azure": [AZURE_COSMOS_DB],
            "gcp": [GCP_FIRESTORE],
        },
        "redis": {
            "aws": [AWS_ELASTICACHE],
            "azure": [AZURE_CACHE_FOR_REDIS],
            "gcp": [GCP_MEMORYSTORE],
        },
    },
    "tool": {
        "docker": {
            "aws": [AWS_ECS_FARGATE],
            "azure": [AZURE_CONTAINER_INSTANCES],
            "gcp": [GCP_CLOUD_RUN_CONTAINER],
        },
        "kubernetes": {
            "aws": [AWS_EKS],
            "azure": [AZURE_AKS],
            "gcp": [GCP_GKE_AUTOPILOT],
        },
    },
}


_MANAGED_ALTERNATIVES: Dict[str, Service] = {
    "compute-EC2": _service(
        "Elastic Beanstalk", "compute", "Managed application deployment", MANAGED,
        ["EC2", "ECS"], ["EC2 instances", "load balancer", "storage"],
        supports_reserved_instances=True, benefit="Reduced operational overhead",
    ),
    "compute-Virtual Machines": _service(
        "App Service", "compute", "Managed web application hosting", MANAGED,
        ["Container Instances", "Virtual Machines"], ["app service plan", "compute hours"],
        supports_reserved_instances=True, benefit="Simplified deployment and scaling",
    ),
    "compute-Compute Engine": _service(
        "App Engine", "compute", "Managed application platform", MANAGED,
        ["Cloud Run", "Compute Engine"], ["instance hours", "requests", "bandwidth"],
        benefit="Automatic scaling and management",
    ),
}


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into mapping proxies and lists into tuples."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(value)
    return value


SERVICE_MAPPINGS: MappingProxyType = _freeze(_SERVICE_MAPPINGS)
MANAGED_ALTERNATIVES: MappingProxyType = _freeze(_MANAGED_ALTERNATIVES)
