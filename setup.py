from setuptools import setup, find_packages

setup(
    name="gemchat",
    version="1.2.0",
    description="GEMCHAT — interactive terminal chat for Google Gemini.",
    long_description="""GEMCHAT features:
- Chat with Gemini from any terminal, markdown rendered with rich
- Conversation memory for the whole session
- Natural-language file creation: "create a python file that ..." writes the reply to disk
- /write <file> <content> to save text directly
- Key lookup: ./.env, ~/.env, then GEMINI_API_KEY in the environment
""",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "google-genai>=1.0.0",
        "rich>=13.7.0",
        "click>=8.1.0",
        "prompt_toolkit>=3.0.0",
        "python-dotenv>=1.0.0",
        "loguru>=0.7.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "gemchat=gemchat.CLI:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
