from setuptools import setup, find_packages

setup(
    name="qrc-ass",
    version="0.1.0",
    description="Convert karaoke lyrics between ASS {\\k} subtitles and QRC per-syllable timing",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(include=["qrc_ass", "qrc_ass.*"]),
    install_requires=[
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "qrc-ass=qrc_ass.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing",
        "Topic :: Utilities",
    ],
    keywords="lyrics karaoke qrc ass subtitles converter",
)
