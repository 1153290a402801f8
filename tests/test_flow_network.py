import pytest

from assignment.flow_network import FlowNetwork


def _textbook_network() -> FlowNetwork:
    network = FlowNetwork(6)
    for u, v, c in [
        (0, 1, 16), (0, 2, 13), (1, 2, 10), (2, 1, 4), (1, 3, 12),
        (3, 2, 9), (2, 4, 14), (4, 3, 7), (3, 5, 20), (4, 5, 4),
    ]:
        network.add_edge(u, v, c)
    return network


def test_textbook_max_flow():
    assert _textbook_network().max_flow(0, 5) == 23


def test_flow_is_conserved_and_within_capacity():
    network = _textbook_network()
    network.max_flow(0, 5)

    net = [0] * network.vertex_count
    for u in range(network.vertex_count):
        for edge in network.edges_from(u):
            if edge.capacity > 0:
                assert 0 <= edge.flow <= edge.capacity
                net[u] -= edge.flow
                net[edge.to] += edge.flow
    assert net[0] == -23
    assert net[5] == 23
    assert all(x == 0 for x in net[1:5])


def test_reverse_edges_mirror_forward_flow():
    network = _textbook_network()
    network.max_flow(0, 5)
    for u in range(network.vertex_count):
        for edge in network.edges_from(u):
            partner = network.edges_from(edge.to)[edge.reverse]
            assert partner.to == u
            assert partner.flow == -edge.flow


def test_augmenting_path_through_residual_edge():
    # source 0, tasks 1-2, users 3-4, sink 5. BFS first routes task 1 to
    # user 3; the second task can only reach the sink by rerouting task 1.
    network = FlowNetwork(6)
    network.add_edge(0, 1, 1)
    network.add_edge(0, 2, 1)
    a_x = network.add_edge(1, 3, 1)
    a_y = network.add_edge(1, 4, 1)
    b_x = network.add_edge(2, 3, 1)
    network.add_edge(3, 5, 1)
    network.add_edge(4, 5, 1)

    assert network.max_flow(0, 5) == 2
    assert (a_x.flow, a_y.flow, b_x.flow) == (0, 1, 1)


def test_parallel_edges_add_up():
    network = FlowNetwork(2)
    network.add_edge(0, 1, 2)
    network.add_edge(0, 1, 3)
    assert network.max_flow(0, 1) == 5


def test_unreachable_sink_gives_zero():
    network = FlowNetwork(3)
    network.add_edge(0, 1, 5)
    assert network.max_flow(0, 2) == 0


def test_reset_flow_allows_resolve():
    network = _textbook_network()
    network.max_flow(0, 5)
    assert network.max_flow(0, 5) == 0
    network.reset_flow()
    assert network.max_flow(0, 5) == 23


def test_self_loop_partner_indices():
    network = FlowNetwork(2)
    loop = network.add_edge(1, 1, 4)
    partner = network.edges_from(1)[loop.reverse]
    assert partner is not loop
    assert partner.capacity == 0
    assert network.edges_from(1)[partner.reverse] is loop


def test_invalid_input_rejected():
    network = FlowNetwork(3)
    with pytest.raises(ValueError):
        network.add_edge(0, 3, 1)
    with pytest.raises(ValueError):
        network.add_edge(0, 1, -1)
    with pytest.raises(ValueError):
        FlowNetwork(1)
    assert network.max_flow(1, 1) == 0
