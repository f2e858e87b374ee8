"""Skill taxonomy: category name to ordered list of canonical skills."""
import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

RECOGNIZED_CATEGORIES = (
    'programming-languages',
    'web-development',
    'backend-development',
    'databases',
    'cloud-platforms',
    'devops',
    'mobile-development',
    'data-science',
    'design',
    'testing',
)

DEFAULT_SKILL_CATEGORIES: Dict[str, List[str]] = {
    'programming-languages': [
        'javascript', 'typescript', 'python', 'java', 'c++', 'c#', 'php', 'ruby', 'go', 'rust',
        'swift', 'kotlin', 'scala', 'r', 'matlab', 'perl', 'haskell', 'clojure', 'erlang'
    ],
    'web-development': [
        'html', 'css', 'react', 'vue', 'angular', 'svelte', 'next.js', 'nuxt.js', 'gatsby',
        'webpack', 'vite', 'parcel', 'babel', 'sass', 'less', 'stylus', 'tailwind', 'bootstrap'
    ],
    'backend-development': [
        'node.js', 'express', 'fastify', 'koa', 'django', 'flask', 'spring', 'laravel', 'rails',
        'asp.net', 'gin', 'fiber', 'actix', 'phoenix', 'play', 'ktor'
    ],
    'databases': [
        'mysql', 'postgresql', 'mongodb', 'redis', 'elasticsearch', 'cassandra', 'dynamodb',
        'sqlite', 'oracle', 'sql server', 'mariadb', 'neo4j', 'influxdb', 'couchdb'
    ],
    'cloud-platforms': [
        'aws', 'azure', 'gcp', 'digital ocean', 'heroku', 'vercel', 'netlify', 'firebase',
        'supabase', 'planetscale', 'railway', 'render'
    ],
    'devops': [
        'docker', 'kubernetes', 'jenkins', 'gitlab ci', 'github actions', 'terraform',
        'ansible', 'chef', 'puppet', 'vagrant', 'prometheus', 'grafana', 'elk stack'
    ],
    'mobile-development': [
        'react native', 'flutter', 'ionic', 'xamarin', 'cordova', 'phonegap', 'swift',
        'kotlin', 'objective-c', 'java android'
    ],
    'data-science': [
        'pandas', 'numpy', 'scikit-learn', 'tensorflow', 'pytorch', 'keras', 'opencv',
        'matplotlib', 'seaborn', 'plotly', 'jupyter', 'spark', 'hadoop'
    ],
    'design': [
        'figma', 'sketch', 'adobe xd', 'photoshop', 'illustrator', 'indesign', 'canva',
        'principle', 'framer', 'invision', 'zeplin'
    ],
    'testing': [
        'jest', 'mocha', 'chai', 'cypress', 'selenium', 'playwright', 'puppeteer',
        'jasmine', 'karma', 'enzyme', 'testing library', 'vitest'
    ],
}


class SkillTaxonomy:
    """Ordered mapping of skill categories to canonical skill names.

    The taxonomy is plain data: categories keep their insertion order, which
    decides the winner when a skill is listed under more than one category.
    """

    def __init__(self, categories: Optional[Mapping[str, Sequence[str]]] = None):
        """Initialize the taxonomy.

        Args:
            categories: Mapping of category name to skill list (defaults to the built-in taxonomy)
        """
        if categories is None:
            categories = DEFAULT_SKILL_CATEGORIES
        self._categories: Dict[str, List[str]] = {
            name: list(skills) for name, skills in categories.items()
        }
        unknown = [name for name in self._categories if name not in RECOGNIZED_CATEGORIES]
        if unknown:
            logger.debug(f"Taxonomy defines custom categories: {unknown}")

    @property
    def categories(self) -> Dict[str, List[str]]:
        return {name: list(skills) for name, skills in self._categories.items()}

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        return iter(self._categories.items())

    def skills(self, category: str) -> List[str]:
        return list(self._categories.get(category, []))

    def all_skills(self) -> List[str]:
        """All canonical skills in category order, duplicates included."""
        return [skill for skills in self._categories.values() for skill in skills]

    def extend(self, category: str, skills: Sequence[str]) -> 'SkillTaxonomy':
        """Return a new taxonomy with extra skills appended to a category."""
        categories = self.categories
        categories.setdefault(category, [])
        categories[category].extend(s for s in skills if s not in categories[category])
        return SkillTaxonomy(categories)

    def __contains__(self, category: str) -> bool:
        return category in self._categories

    def __len__(self) -> int:
        return len(self._categories)
