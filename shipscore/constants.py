"""Static tables used by the detector and the scoring engine."""

from __future__ import annotations

from typing import Dict, Tuple

NICHE_PACKAGES: Dict[str, Tuple[str, str]] = {
    # name: (package category, risk level)
    # ML / AI
    "transformers": ("ml", "high"),
    "@huggingface/transformers": ("ml", "high"),
    "langchain": ("ml", "high"),
    "llamaindex": ("ml", "high"),
    "torch": ("ml", "critical"),
    "pytorch": ("ml", "critical"),
    "tensorflow": ("ml", "critical"),
    "keras": ("ml", "high"),
    "scikit-learn": ("ml", "medium"),
    "openai": ("ml", "critical"),
    "anthropic": ("ml", "critical"),
    "cohere": ("ml", "high"),
    "replicate": ("ml", "high"),
    "chromadb": ("ml", "medium"),
    "pinecone-client": ("ml", "medium"),
    "weaviate-client": ("ml", "medium"),
    # Automation
    "playwright": ("automation", "medium"),
    "puppeteer": ("automation", "medium"),
    "selenium-webdriver": ("automation", "medium"),
    "scrapy": ("automation", "medium"),
    # Blockchain
    "ethers": ("blockchain", "critical"),
    "web3": ("blockchain", "critical"),
    "@solana/web3.js": ("blockchain", "critical"),
    "hardhat": ("blockchain", "high"),
    # Infrastructure
    "aws-sdk": ("infra", "critical"),
    "@aws-sdk/client-s3": ("infra", "high"),
    "@aws-sdk/client-dynamodb": ("infra", "high"),
    "@aws-sdk/client-lambda": ("infra", "high"),
    "aws-cognito": ("infra", "high"),
    "stripe": ("infra", "critical"),
    "@stripe/stripe-js": ("infra", "high"),
    "twilio": ("infra", "high"),
    "sendgrid": ("infra", "medium"),
    "nodemailer": ("infra", "medium"),
    "redis": ("infra", "medium"),
    "ioredis": ("infra", "medium"),
    "mongodb": ("infra", "medium"),
    "mongoose": ("infra", "medium"),
    "prisma": ("infra", "medium"),
    "@prisma/client": ("infra", "medium"),
    "typeorm": ("infra", "medium"),
    "sequelize": ("infra", "medium"),
    # Data
    "d3": ("data", "medium"),
    "chart.js": ("data", "medium"),
    "recharts": ("data", "medium"),
    "apexcharts": ("data", "medium"),
    "plotly": ("data", "medium"),
    "highcharts": ("data", "medium"),
    "pandas": ("data", "medium"),
    "numpy": ("data", "medium"),
    "matplotlib": ("data", "medium"),
    "seaborn": ("data", "medium"),
    # UI
    "@mui/material": ("ui", "low"),
    "@mui/icons-material": ("ui", "low"),
    "antd": ("ui", "low"),
    "@chakra-ui/react": ("ui", "low"),
    "tailwindcss": ("ui", "low"),
    "styled-components": ("ui", "low"),
    "emotion": ("ui", "low"),
    "framer-motion": ("ui", "low"),
    "three": ("ui", "medium"),
    "@react-three/fiber": ("ui", "medium"),
    "react-spring": ("ui", "low"),
    # Realtime
    "socket.io": ("realtime", "medium"),
    "socket.io-client": ("realtime", "medium"),
    "@socket.io/redis-adapter": ("realtime", "medium"),
    "ws": ("realtime", "medium"),
    "websocket": ("realtime", "medium"),
    "pusher-js": ("realtime", "medium"),
    "@pusher/pusher-websocket-react": ("realtime", "medium"),
    "ably": ("realtime", "medium"),
    "centrifuge": ("realtime", "medium"),
    # Testing
    "jest": ("testing", "low"),
    "vitest": ("testing", "low"),
    "@playwright/test": ("testing", "medium"),
    "cypress": ("testing", "medium"),
    "@testing-library/react": ("testing", "low"),
    "@testing-library/vue": ("testing", "low"),
    "@testing-library/angular": ("testing", "low"),
    "mocha": ("testing", "low"),
    "chai": ("testing", "low"),
    "supertest": ("testing", "low"),
    "msw": ("testing", "low"),
    "nock": ("testing", "low"),
    "sinon": ("testing", "low"),
    "jest-mock-extended": ("testing", "low"),
}

# Weights sum to 100.
CATEGORY_WEIGHTS: Dict[str, float] = {
    "codeQuality": 18,
    "security": 22,
    "dependencies": 8,
    "devops": 8,
    "architecture": 8,
    "frameworkSpecific": 4,
    "testing": 8,
    "documentation": 4,
    "performance": 8,
    "aiSpecific": 3,
    "accessibility": 2,
    "observability": 6,
    "dataQuality": 3,
    "repoHealth": 6,
}

# Fraction of the category score a single failure preserves (higher = milder).
SEVERITY_IMPACT: Dict[str, float] = {
    "blocker": 0.0,
    "high": 0.5,
    "medium": 0.75,
    "low": 0.9,
}

MOCK_CHECK_PREFIX = "mock-"
MOCK_PENALTY: Dict[str, int] = {"high": 15, "medium": 8, "low": 3}
MOCK_PENALTY_CAP = 35
BLOCKER_PENALTY = 40
