from setuptools import setup, find_packages
import re

# Read version from quarterlycalc/__init__.py
with open('quarterlycalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='quarterly-calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'quarterlycalc.sdk': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'quarterly-calc=quarterlycalc.cli.__main__:main',
            'quarterly-calc-mcp=quarterlycalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Estimated quarterly tax planning for self-employed households.',
    python_requires='>=3.10',
)
