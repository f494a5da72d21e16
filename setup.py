from setuptools import setup, find_namespace_packages

setup(
    name='http_negotiate',
    version='0.1',
    packages=find_namespace_packages(include=['http_negotiate', 'http_negotiate.*']),
    python_requires='>=3.10',
    install_requires=[
        'abnf>=2.0'
    ],
    extras_require={
        'test': [
            'pytest'
        ]
    }
)
