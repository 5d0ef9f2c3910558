import json
import threading
from collections import OrderedDict

import pytest

from agentscan.errors import (InvalidRuleTableError, InvalidUserRulesFile,
                              RulesFileNotFoundError)
from agentscan.matcher import PatternMatcher
from agentscan.rules import (POSITIONAL, RuleRegistry, RuleTable,
                             load_user_rules, merge)
from tests.fakes import FakeBaseRules


class TestRuleTable:
    def test_scalar_and_list_values_become_tuples(self):
        table = RuleTable(OrderedDict([('A', 'x'), ('B', ['y', '', 'z']),
                                       ('C', '')]))

        assert table['A'] == ('x', )
        assert table['B'] == ('y', 'z')
        assert table['C'] == ()

    def test_keeps_order_of_pairs(self):
        table = RuleTable([('b', '1'), ('a', '2'), ('c', '3')])

        assert list(table) == ['b', 'a', 'c']

    def test_none_label_is_positional(self):
        table = RuleTable([(None, '(Foo)')])

        assert list(table) == [POSITIONAL]

    def test_rejects_values_that_are_not_patterns(self):
        with pytest.raises(InvalidRuleTableError):
            RuleTable({'A': 3})
        with pytest.raises(InvalidRuleTableError):
            RuleTable({'A': ['x', 3]})

    def test_is_read_only(self):
        table = RuleTable({'A': 'x'})

        with pytest.raises(TypeError):
            table['A'] = ('y', )


class TestMerge:
    def test_keeps_first_table_order_then_appends_new_keys(self):
        first = OrderedDict([('b', '1'), ('a', '2')])
        second = OrderedDict([('c', '3'), ('a', '4'), ('d', '5')])

        assert list(merge(first, second)) == ['b', 'a', 'c', 'd']

    def test_colliding_patterns_accumulate(self):
        merged = merge({'A': 'foo'}, {'A': 'bar'})

        assert merged['A'] == ('foo', 'bar')

    def test_colliding_patterns_match_either_side(self):
        merged = merge({'A': 'foo'}, {'A': 'bar'}, {'B': 'ba'})
        matcher = PatternMatcher()

        assert matcher.find_first_match(merged, 'only foo here') == 'A'
        assert matcher.find_first_match(merged, 'only bar here') == 'A'

    def test_list_values_get_the_new_pattern_appended(self):
        merged = merge({'A': ['x', 'y']}, {'A': 'z'})

        assert merged['A'] == ('x', 'y', 'z')

    def test_empty_value_never_overwrites(self):
        merged = merge({'A': 'one'}, {'A': ''})

        assert merged['A'] == ('one', )

    def test_skips_missing_tables(self):
        assert list(merge(None, {'A': 'x'}, None)) == ['A']

    def test_does_not_modify_its_inputs(self):
        first = RuleTable({'A': 'x'})
        merge(first, {'A': 'y'})

        assert first['A'] == ('x', )


class TestRuleRegistry:
    @pytest.fixture
    def base(self):
        return FakeBaseRules()

    def test_device_rules_check_desktop_devices_first(self, base):
        registry = RuleRegistry(base)
        rules = registry.device_rules()

        assert list(rules)[0] == 'Macintosh'
        assert PatternMatcher().find_first_match(
            rules, 'Macintosh; Mobile') == 'Macintosh'

    def test_browser_rules_put_supplementary_browsers_first(self, base):
        rules = RuleRegistry(base).browser_rules()

        assert list(rules)[:3] == ['Opera Mini', 'Opera', 'Edge']
        assert rules['Chrome'] == ('Chrome', r'\bCrMo\b|CriOS')

    def test_platform_rules_put_base_systems_first(self, base):
        rules = RuleRegistry(base).platform_rules()

        assert list(rules)[:2] == ['AndroidOS', 'iOS']
        assert PatternMatcher().find_first_match(
            rules, 'Linux; Android 13') == 'AndroidOS'

    def test_property_rules_put_supplementary_properties_first(self, base):
        rules = RuleRegistry(base).property_rules()

        assert rules['Edge'] == ('Edge/[VER]', 'Edg/[VER]', 'Edge/[VER]')

    def test_all_rules_composition(self, base):
        rules = RuleRegistry(base).all_rules()
        labels = list(rules)

        assert labels[:3] == ['Macintosh', 'iPhone', 'GenericPhone']
        assert labels.index('iPad') < labels.index('AndroidOS')
        assert labels.index('AndroidOS') < labels.index('Windows')
        assert labels[-1] == 'WeChat'
        assert rules['Macintosh'] == ('Macintosh', 'PPC')

    def test_all_rules_is_memoized(self, base):
        registry = RuleRegistry(base)

        assert registry.all_rules() is registry.all_rules()
        assert base.phone_reads == 1

    def test_all_rules_is_built_once_under_concurrent_first_use(self, base):
        registry = RuleRegistry(base)
        barrier = threading.Barrier(16)
        tables = []

        def worker():
            barrier.wait()
            tables.append(registry.all_rules())

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for each in threads:
            each.start()
        for each in threads:
            each.join()

        assert base.phone_reads == 1
        assert len(set(id(t) for t in tables)) == 1

    def test_user_rules_go_in_front_of_supplementary_rules(self, base):
        registry = RuleRegistry(base, {
            'browsers': RuleTable({'Acme': 'AcmeBrowser'}),
            'os': RuleTable({'AcmeOS': 'AcmeOS'}),
        })

        assert list(registry.browser_rules())[0] == 'Acme'
        assert list(registry.additional_operating_systems())[0] == 'AcmeOS'
        assert 'Acme' in registry.all_rules()


class TestLoadUserRules:
    def write(self, tmp_path, content):
        path = tmp_path / 'rules.json'
        path.write_text(content)
        return str(path)

    def test_loads_sections_in_order(self, tmp_path):
        path = self.write(tmp_path, json.dumps(
            {'browsers': {'Zeta': 'Zeta', 'Alpha': ['Alpha', 'Alfa']}}))

        rules = load_user_rules(path)

        assert list(rules['browsers']) == ['Zeta', 'Alpha']
        assert rules['browsers']['Alpha'] == ('Alpha', 'Alfa')

    def test_missing_file(self, tmp_path):
        with pytest.raises(RulesFileNotFoundError):
            load_user_rules(str(tmp_path / 'missing.json'))

    def test_not_json(self, tmp_path):
        with pytest.raises(InvalidUserRulesFile):
            load_user_rules(self.write(tmp_path, '{not json'))

    def test_unknown_section(self, tmp_path):
        path = self.write(tmp_path, json.dumps({'robots': {}}))

        with pytest.raises(InvalidUserRulesFile) as e:
            load_user_rules(path)
        assert 'robots' in e.value.reason

    def test_section_must_be_an_object(self, tmp_path):
        path = self.write(tmp_path, json.dumps({'os': ['Linux']}))

        with pytest.raises(InvalidUserRulesFile):
            load_user_rules(path)

    def test_bad_pattern_value(self, tmp_path):
        path = self.write(tmp_path, json.dumps({'os': {'Linux': 1}}))

        with pytest.raises(InvalidUserRulesFile):
            load_user_rules(path)
