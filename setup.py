from setuptools import setup, find_packages

setup(
    name="artist-extractor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "PyMuPDF>=1.23.0",
        "pdfplumber>=0.10.0",
        "python-docx>=1.1.0",
        "Pillow>=10.0.0",
        "pytesseract>=0.3.10",
        "google-cloud-vision>=3.4.0",
        "openai>=1.3.0",
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
        "fastapi>=0.104.0",
        "uvicorn>=0.24.0",
        "python-multipart>=0.0.6",
        "loguru>=0.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "artist-extract=artist_extractor.cli:main",
        ],
    },
)
