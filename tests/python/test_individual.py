from __future__ import annotations

from pytest import approx

from biotope.genotype import Genotype
from biotope.individual import Individual
from biotope.phenotype import Phenotype
from biotope.rng import DeterministicRng
from biotope.xml_node import XmlDocument


def _make_individual(energy: float, probability: float = 1.0, mutability: float = 0.0) -> Individual:
    return Individual(genotype=Genotype(10.0, probability, mutability), phenotype=Phenotype(energy))


def test_new_individual_is_alive():
    individual = _make_individual(5.0)
    assert individual.alive
    assert not individual.is_dead()
    individual.die()
    assert individual.is_dead()


def test_hunger_and_competitive_weight():
    individual = _make_individual(5.0)
    assert individual.is_hungry(10.0)
    assert individual.competitive_weight(10.0) == approx(5.0)

    assert not individual.is_hungry(5.0)
    assert individual.competitive_weight(5.0) == 0.0

    individual.die()
    assert not individual.is_hungry(10.0)
    assert individual.competitive_weight(10.0) == 0.0


def test_dead_individual_is_not_fed():
    individual = _make_individual(5.0)
    individual.die()
    individual.feed(3)
    assert individual.energy == approx(5.0)


def test_maintenance_spends_energy():
    individual = _make_individual(5.0)
    individual.perform_maintenance(DeterministicRng(0), energy_cost=1.5)
    assert individual.alive
    assert individual.energy == approx(3.5)


def test_maintenance_starves_when_reserve_runs_out():
    short = _make_individual(0.5)
    short.perform_maintenance(DeterministicRng(0), energy_cost=1.0)
    assert short.is_dead()

    exact = _make_individual(1.0)
    exact.perform_maintenance(DeterministicRng(0), energy_cost=1.0)
    assert exact.is_dead()


def test_maintenance_random_death():
    individual = _make_individual(5.0)
    individual.perform_maintenance(DeterministicRng(0), energy_cost=1.0, death_probability=1.0)
    assert individual.is_dead()


def test_maintenance_on_dead_individual_is_a_no_op():
    individual = _make_individual(5.0)
    individual.die()
    rng = DeterministicRng(2)
    reference = DeterministicRng(2)
    individual.perform_maintenance(rng, energy_cost=1.0, death_probability=0.5)
    assert individual.energy == approx(5.0)
    assert rng.next_float() == reference.next_float()


def test_dead_individual_never_reproduces():
    individual = _make_individual(50.0)
    individual.die()
    assert not individual.will_reproduce(DeterministicRng(0))


def test_reproduce_splits_energy_and_inherits_genotype():
    parent = _make_individual(20.0, mutability=0.0)
    rng = DeterministicRng(6)
    assert parent.will_reproduce(rng)

    child = parent.reproduce(rng)

    assert parent.energy == approx(10.0)
    assert child.energy == approx(10.0)
    assert child.alive
    assert child.genotype == parent.genotype
    assert child.phenotype is not parent.phenotype


def test_copy_does_not_share_phenotype():
    individual = _make_individual(4.0)
    clone = individual.copy()
    clone.feed(2)
    clone.die()
    assert individual.energy == approx(4.0)
    assert individual.alive


def test_xml_round_trip():
    individual = Individual(genotype=Genotype(15.0, 0.4, 0.05), phenotype=Phenotype(8.25))
    document = XmlDocument.create("Individual")
    individual.save(document.root)

    loaded = Individual.from_xml(XmlDocument.from_string(document.to_string()).root)

    assert loaded.genotype == individual.genotype
    assert loaded.energy == approx(8.25)
    assert loaded.alive


def test_describe_mentions_state():
    text = _make_individual(3.0).describe()
    assert "Individual:" in text
    assert "Energy: 3" in text
    assert "Reproduction probability: 1" in text
