"""
OE Manuals setuptools setup script
"""

from glob import glob
from setuptools import setup, find_packages


setup(
    name='oe_manuals',
    version='1.0.0',
    description='OE Manuals',
    long_description='A RESTful web service cataloging instructional video '
                     'manuals with a unique display order and thumbnail '
                     'images.',
    classifiers=[
    ],
    keywords='',
    packages=find_packages(exclude=['tests', 'tests.*']) +
    ['oe_manuals.db_migration.' + p + '.versions' for p in ('manuals',)],
    include_package_data=True,
    scripts=glob('scripts/*.py'),
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=[
        'Flask >= 2.3',
        'Flask-Cors',
        'Flask-SQLAlchemy >= 3.0',
        'SQLAlchemy >= 1.4.18',
        'alembic',
        'marshmallow >= 3.13, < 4',
        'cryptography',
        'Werkzeug >= 2.3',
    ],
    extras_require={
        'testing': [
            'WebTest >= 1.3.1',
            'pytest >= 3.7.4',
            'pytest-cov',
        ],
    },
    entry_points={
        'paste.app_factory': [
            'main = oe_manuals:main',
        ],
    },
)
