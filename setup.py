from os import path

from setuptools import setup

this_dir = path.abspath(path.dirname(__file__))
with open(path.join(this_dir, "README.md")) as f:
    long_description = f.read()

setup(
    name="FastDoc",
    description="FastDoc - unit of work engine for document database clients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    version="0.1",
    license="MIT",
    author="Joseph Kim, Benzamin Yoon",
    author_email="cloudeyes@gmail.com",
    packages=["fastdoc", "fastdoc.test", "fastdoc.core"],
    package_data={
        "fastdoc": ["py.typed"],
        "fastdoc.core": ["py.typed"],
        "fastdoc.test": ["py.typed"],
    },
    keywords=["fastdoc", "document-database", "unit-of-work", "pydantic"],
    install_requires=[
        "pydantic>=2",
        "uvicorn",
        "colorama",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
    ],
    entry_points={
        "console_scripts": [
            "fastdoc = fastdoc.command:console_main",
        ]
    },
)
