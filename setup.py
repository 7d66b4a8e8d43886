from setuptools import setup

requirements = ["flask>=3.0", "gunicorn>=21.2", "pydantic>=2,<3"]

setup(
    name="holamundo",
    version="0.1.0",
    description="HTTP service greeting from Github",
    author="IS DevOps team",
    author_email="is-devops-team@canonical.com",
    packages=["holamundo"],
    package_dir={"": "src"},
    install_requires=requirements,
    extras_require={"test": ["pytest", "requests", "werkzeug"]},
    entry_points={"console_scripts": ["holamundo = holamundo.main:main"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
