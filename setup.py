from setuptools import setup, find_namespace_packages

setup(
    name="hr-document-parser",
    version="0.1.0",
    author="devjun",
    author_email="jyporse@naver.com",
    description="A FastAPI service that extracts text from uploaded HR documents",
    packages=find_namespace_packages(where="src", include=["docparse*"]),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        # FastAPI 관련
        "fastapi>=0.115.9",
        "uvicorn[standard]>=0.24.0",
        "python-multipart>=0.0.20",

        # LLM (텍스트 보정, 이미지 OCR)
        "openai>=1.40.0",

        # 이미지 메타데이터
        "Pillow>=10.0.0",

        # PowerPoint 파싱
        "python-pptx>=0.6.23",

        # 기타 유틸리티
        "python-dotenv>=1.1.0",
        "pydantic>=2.11.5",
        "pydantic-settings>=2.9.1",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-asyncio>=0.23",
            "pytest-cov>=2.0",
            "httpx>=0.27",
            "black>=21.5b2",
            "isort>=5.9.3",
            "flake8>=3.9.2",
            "mypy>=0.910",
        ],
    },
    entry_points={
        "console_scripts": [
            "docparse=docparse.main:main",
        ],
    },
)
