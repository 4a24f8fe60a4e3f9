"""Simple usage example for NeuroFingerprint.

Builds a small text network, processes a few memories, watches STDP
strengthen the wiring and compares the resulting fingerprints.
"""

import sys
import os
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine_monitoring import health_context
from fingerprint_engine import NeuralFingerprintEngine
from fixed_point import SCALE, to_float
from snn_config import load_engine_config


def main():
    # Seeded so hidden-layer polarity and random weights are reproducible
    engine = NeuralFingerprintEngine(load_engine_config({"random_seed": 42}))

    # 16 text inputs -> 8 hidden -> 4 outputs
    net = engine.create_network("memories", 16, 4)
    hidden = engine.add_hidden_layer(net, 8, 1)
    engine.connect_layers(net, 0, 1, SCALE // 4, SCALE)
    engine.connect_layers(net, 1, 2, SCALE // 4, SCALE)

    outputs = list(range(16, 20))
    engine.register_concept("outputs", outputs, SCALE // 2)
    engine.register_concept("hidden", hidden, SCALE // 2)

    syn = engine.synapses(net, 0)[0]
    print("=== Initial State ===")
    print(f"0→{syn.target_id} weight: {to_float(syn.weight):.3f}")

    print("\n=== Processing memories ===")
    texts = {
        "m1": "~~~~ bright day",
        "m2": "~~~~ bright night",
        "m3": "quiet evening",
    }
    for memory_id, text in texts.items():
        enc = engine.process_memory(net, text, memory_id=memory_id)
        print(f"{memory_id}: {len(enc.activated_neurons)} neurons, "
              f"score {enc.neuroplasticity_score}, "
              f"concepts {engine.activated_concepts(enc)}, "
              f"fingerprint {enc.fingerprint_hex[:16]}...")

    syn = engine.synapses(net, 0)[0]
    print(f"0→{syn.target_id} weight: {to_float(syn.weight):.3f} (after STDP)")

    print("\n=== Similarity ===")
    print(f"m1 vs m2: {engine.similarity('m1', 'm2')}")
    print(f"m1 vs m3: {engine.similarity('m1', 'm3')}")

    print("\n=== Telemetry ===")
    tel = engine.telemetry(net)
    print(f"Neurons per layer: {tel.neurons_per_layer}")
    print(f"Synapses: {tel.total_synapses}")
    print(f"Global firing rate: {tel.global_firing_rate:.4f}")
    print(f"Mean weight: {to_float(tel.mean_weight):.3f}")
    print(health_context(engine))

    print("\n=== Checkpoint ===")
    path = os.path.join(tempfile.gettempdir(), "neurofingerprint_example.json")
    engine.checkpoint_network(net, path)
    restored = engine.load_network(path, network_id="restored")
    print(f"Restored network: {engine.telemetry(restored).total_neurons} neurons, "
          f"time step {engine.network(restored).timestep}")


if __name__ == "__main__":
    main()
