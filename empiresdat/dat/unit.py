"""Unit record decoding for the empires.dat unit table.

A unit record starts with a category byte and a common prefix shared by
every category. Depending on the category, up to six optional blocks
follow in fixed order: motion, commandable, battle, projectile, trainable,
building. Fields the format leaves unexplained are skipped at their byte
width so the stream stays aligned for the next record.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from empiresdat.config import (
    GRAPHIC_DISPLACEMENT_COUNT,
    RESOURCE_COST_COUNT,
    RESOURCE_STORAGE_COUNT,
)
from empiresdat.dat.enums import (
    UnitCategory,
    classify,
    has_battle_params,
    has_building_params,
    has_commandable_params,
    has_motion_params,
    has_projectile_params,
    has_trainable_params,
)
from empiresdat.dat.stream import DatStream


@dataclass(frozen=True, slots=True)
class ResourceStorage:
    type_id: int
    amount: float
    enabled: bool


@dataclass(frozen=True, slots=True)
class ResourceCost:
    type_id: int
    amount: int
    enabled: bool


@dataclass(frozen=True, slots=True)
class DamageGraphic:
    graphic_id: int
    damage_percent: int
    old_apply_mode: int
    apply_mode: int


@dataclass(frozen=True, slots=True)
class UnitCommand:
    """One entry of a commandable unit's command list (position is priority)."""
    id: int
    enabled: bool
    type_id: int
    class_id: int
    unit_id: int
    terrain_id: int
    resource_in: int
    resource_productivity_multiplier: int
    resource_out: int
    resource: int
    quantity: float
    execution_radius: float
    extra_range: float
    selection_enabler: int
    plunder_source: int
    selection_mode: int
    right_click_mode: int
    tool_graphic_id: int
    proceeding_graphic_id: int
    action_graphic_id: int
    carrying_graphic_id: int
    execution_sound_id: int
    resource_deposit_sound_id: int


@dataclass(frozen=True, slots=True)
class MotionParams:
    speed: float
    walking_graphics: tuple[int, int]
    rotation_speed: float
    tracking_unit: int
    tracking_unit_used: bool
    tracking_unit_density: float


@dataclass(frozen=True, slots=True)
class CommandableParams:
    action_when_discovered_id: int
    search_radius: float
    work_rate: float
    drop_sites: tuple[int, int]
    task_swap_id: int
    attack_sound: int
    move_sound: int
    animal_mode: int
    commands: tuple[UnitCommand, ...]


@dataclass(frozen=True, slots=True)
class BattleParams:
    default_armor: int
    attacks: tuple[tuple[int, int], ...]   # (class, amount)
    armors: tuple[tuple[int, int], ...]    # (class, amount)
    terrain_restriction_for_damage_multiplier: int
    max_range: float
    blast_width: float
    reload_time: float
    projectile_unit_id: int
    accuracy_percent: int
    tower_mode: int
    frame_delay: int
    graphic_displacements: tuple[float, float, float]
    blast_attack_level: int
    min_range: float
    attack_graphic: int
    displayed_melee_armour: int
    displayed_attack: int
    displayed_range: float
    displayed_reload_time: float


@dataclass(frozen=True, slots=True)
class ProjectileParams:
    stretch_mode: int
    smart_mode: int
    drop_animation_mode: int
    penetration_mode: int
    projectile_arc: float


@dataclass(frozen=True, slots=True)
class TrainableParams:
    resource_costs: tuple[ResourceCost, ResourceCost, ResourceCost]
    train_time: int
    train_location_id: int
    button_id: int
    displayed_pierce_armor: int


@dataclass(frozen=True, slots=True)
class BuildingParams:
    construction_graphic_id: int
    adjacent_mode: int
    graphics_angle: int
    disappears_when_built: bool
    stack_unit_id: int
    foundation_terrain_id: int
    old_terrain_id: int
    research_id: int
    construction_sound: int


@dataclass(frozen=True, slots=True)
class Unit:
    """A fully decoded unit record."""
    id: int
    category: UnitCategory
    name: str
    language_dll_name: int
    language_dll_creation: int
    class_id: int
    standing_graphic: int
    dying_graphics: tuple[int, int]
    death_mode: int
    hit_points: int
    line_of_sight: float
    garrison_capability: int
    collision_size_x: float
    collision_size_y: float
    collision_size_z: float
    train_sound: int
    dead_unit_id: int
    placement_mode: int
    air_mode: int
    icon_id: int
    hide_in_editor: bool
    enabled: bool
    placement_side_terrain: tuple[int, int]
    placement_terrain: tuple[int, int]
    clearance_size_x: float
    clearance_size_y: float
    hill_mode: int
    visible_in_fog: bool
    terrain_restriction: int
    fly_mode: int
    resource_capacity: int
    resource_decay: float
    blast_defense_level: int
    sub_type: int
    interaction_mode: int
    minimap_mode: int
    command_attribute: int
    minimap_color: int
    language_dll_help: int
    language_dll_hotkey_text: int
    hotkey: int
    unselectable: bool
    enable_auto_gather: bool
    auto_gather_mode: int
    auto_gather_id: int
    selection_effect: int
    editor_selection_color: int
    selection_shape_size_x: float
    selection_shape_size_y: float
    selection_shape_size_z: float
    resource_storage: tuple[ResourceStorage, ResourceStorage, ResourceStorage]
    damage_graphics: tuple[DamageGraphic, ...]
    selection_sound: int
    dying_sound: int
    attack_mode: int
    id2: int

    motion: Optional[MotionParams] = None
    commandable: Optional[CommandableParams] = None
    battle: Optional[BattleParams] = None
    projectile: Optional[ProjectileParams] = None
    trainable: Optional[TrainableParams] = None
    building: Optional[BuildingParams] = None

    @property
    def speed(self) -> Optional[float]:
        return self.motion.speed if self.motion is not None else None


def read_unit(stream: DatStream) -> Unit:
    """Decode one unit record starting at the stream's cursor.

    Raises InvalidCategoryTag, UnexpectedEndOfStream or InvalidStringEncoding
    on malformed input; nothing partial is ever returned.
    """
    category = classify(stream.read_u8())
    name_length = stream.read_u16()

    prefix = dict(
        id=stream.read_i16(),
        language_dll_name=stream.read_i16(),
        language_dll_creation=stream.read_i16(),
        class_id=stream.read_i16(),
        standing_graphic=stream.read_i16(),
        dying_graphics=(stream.read_i16(), stream.read_i16()),
        death_mode=stream.read_i8(),
        hit_points=stream.read_i16(),
        line_of_sight=stream.read_f32(),
        garrison_capability=stream.read_i8(),
        collision_size_x=stream.read_f32(),
        collision_size_y=stream.read_f32(),
        collision_size_z=stream.read_f32(),
        train_sound=stream.read_i16(),
        dead_unit_id=stream.read_i16(),
        placement_mode=stream.read_i8(),
        air_mode=stream.read_i8(),
        icon_id=stream.read_i16(),
        hide_in_editor=stream.read_bool_u8(),
    )
    stream.skip(2)  # unknown u16
    prefix["enabled"] = stream.read_bool_u8()

    prefix.update(
        placement_side_terrain=(stream.read_i16(), stream.read_i16()),
        placement_terrain=(stream.read_i16(), stream.read_i16()),
        clearance_size_x=stream.read_f32(),
        clearance_size_y=stream.read_f32(),
        hill_mode=stream.read_i8(),
        visible_in_fog=stream.read_bool_u8(),
        terrain_restriction=stream.read_i16(),
        fly_mode=stream.read_i8(),
        resource_capacity=stream.read_i16(),
        resource_decay=stream.read_f32(),
        blast_defense_level=stream.read_i8(),
        sub_type=stream.read_i8(),
        interaction_mode=stream.read_i8(),
        minimap_mode=stream.read_i8(),
        command_attribute=stream.read_i8(),
    )
    stream.skip(4)  # unknown f32
    prefix.update(
        minimap_color=stream.read_u8(),
        language_dll_help=stream.read_i32(),
        language_dll_hotkey_text=stream.read_i32(),
        hotkey=stream.read_i32(),
        unselectable=stream.read_bool_u8(),
        enable_auto_gather=stream.read_bool_u8(),
        auto_gather_mode=stream.read_i8(),
        auto_gather_id=stream.read_i8(),
        selection_effect=stream.read_i8(),
        editor_selection_color=stream.read_u8(),
        selection_shape_size_x=stream.read_f32(),
        selection_shape_size_y=stream.read_f32(),
        selection_shape_size_z=stream.read_f32(),
        resource_storage=stream.read_array(RESOURCE_STORAGE_COUNT, read_resource_storage),
    )

    damage_graphic_count = stream.read_u8()
    prefix.update(
        damage_graphics=stream.read_array(damage_graphic_count, read_damage_graphic),
        selection_sound=stream.read_i16(),
        dying_sound=stream.read_i16(),
        attack_mode=stream.read_i8(),
    )
    stream.skip(1)  # unknown u8

    prefix["name"] = stream.read_sized_str(name_length)
    prefix["id2"] = stream.read_i16()

    if category in (UnitCategory.TREE, UnitCategory.GRAPHIC_EFFECT):
        # No sub-records on these categories
        return Unit(category=category, **prefix)
    if category in (UnitCategory.FLAG, UnitCategory.UNKNOWN_25):
        # Speed slot, present although these units never move
        stream.skip(4)

    motion = read_motion_params(stream) if has_motion_params(category) else None
    commandable = read_commandable_params(stream) if has_commandable_params(category) else None
    battle = read_battle_params(stream) if has_battle_params(category) else None
    projectile = read_projectile_params(stream) if has_projectile_params(category) else None
    trainable = read_trainable_params(stream) if has_trainable_params(category) else None
    building = read_building_params(stream) if has_building_params(category) else None

    return Unit(
        category=category,
        motion=motion,
        commandable=commandable,
        battle=battle,
        projectile=projectile,
        trainable=trainable,
        building=building,
        **prefix,
    )


def read_resource_storage(stream: DatStream) -> ResourceStorage:
    return ResourceStorage(
        type_id=stream.read_i16(),
        amount=stream.read_f32(),
        enabled=stream.read_bool_u8(),
    )


def read_damage_graphic(stream: DatStream) -> DamageGraphic:
    return DamageGraphic(
        graphic_id=stream.read_i16(),
        damage_percent=stream.read_u8(),
        old_apply_mode=stream.read_u8(),
        apply_mode=stream.read_u8(),
    )


def read_motion_params(stream: DatStream) -> MotionParams:
    speed = stream.read_f32()
    walking_graphics = (stream.read_i16(), stream.read_i16())
    rotation_speed = stream.read_f32()
    stream.skip(1)  # unknown u8
    tracking_unit = stream.read_i16()
    tracking_unit_used = stream.read_bool_u8()
    tracking_unit_density = stream.read_f32()
    stream.skip(1)  # unknown u8
    return MotionParams(
        speed=speed,
        walking_graphics=walking_graphics,
        rotation_speed=rotation_speed,
        tracking_unit=tracking_unit,
        tracking_unit_used=tracking_unit_used,
        tracking_unit_density=tracking_unit_density,
    )


def read_commandable_params(stream: DatStream) -> CommandableParams:
    """Decode the commandable block, ending in a u16-counted command list."""
    action_when_discovered_id = stream.read_i16()
    search_radius = stream.read_f32()
    work_rate = stream.read_f32()
    drop_sites = (stream.read_i16(), stream.read_i16())
    task_swap_id = stream.read_i8()
    attack_sound = stream.read_i16()
    move_sound = stream.read_i16()
    animal_mode = stream.read_i8()

    command_count = stream.read_u16()
    commands = stream.read_array(command_count, read_unit_command)

    return CommandableParams(
        action_when_discovered_id=action_when_discovered_id,
        search_radius=search_radius,
        work_rate=work_rate,
        drop_sites=drop_sites,
        task_swap_id=task_swap_id,
        attack_sound=attack_sound,
        move_sound=move_sound,
        animal_mode=animal_mode,
        commands=commands,
    )


def read_unit_command(stream: DatStream) -> UnitCommand:
    """Decode one command entry (enabled flag is a u16, zero/nonzero)."""
    enabled = stream.read_bool_u16()
    command_id = stream.read_i16()
    stream.skip(1)  # unknown u8
    type_id = stream.read_i16()
    class_id = stream.read_i16()
    unit_id = stream.read_i16()
    terrain_id = stream.read_i16()
    resource_in = stream.read_i16()
    resource_productivity_multiplier = stream.read_i16()
    resource_out = stream.read_i16()
    resource = stream.read_i16()
    quantity = stream.read_f32()
    execution_radius = stream.read_f32()
    extra_range = stream.read_f32()
    stream.skip(1)  # unknown u8
    stream.skip(4)  # unknown f32
    selection_enabler = stream.read_i8()
    stream.skip(1)  # unknown u8
    plunder_source = stream.read_i16()
    stream.skip(2)  # unknown i16
    selection_mode = stream.read_i8()
    right_click_mode = stream.read_i8()
    stream.skip(1)  # unknown u8
    return UnitCommand(
        id=command_id,
        enabled=enabled,
        type_id=type_id,
        class_id=class_id,
        unit_id=unit_id,
        terrain_id=terrain_id,
        resource_in=resource_in,
        resource_productivity_multiplier=resource_productivity_multiplier,
        resource_out=resource_out,
        resource=resource,
        quantity=quantity,
        execution_radius=execution_radius,
        extra_range=extra_range,
        selection_enabler=selection_enabler,
        plunder_source=plunder_source,
        selection_mode=selection_mode,
        right_click_mode=right_click_mode,
        tool_graphic_id=stream.read_i16(),
        proceeding_graphic_id=stream.read_i16(),
        action_graphic_id=stream.read_i16(),
        carrying_graphic_id=stream.read_i16(),
        execution_sound_id=stream.read_i16(),
        resource_deposit_sound_id=stream.read_i16(),
    )


def _read_class_amount(stream: DatStream) -> tuple[int, int]:
    return stream.read_i16(), stream.read_i16()


def read_battle_params(stream: DatStream) -> BattleParams:
    """Decode the battle block: two u16-counted (class, amount) lists, then scalars."""
    default_armor = stream.read_u8()

    attack_count = stream.read_u16()
    attacks = stream.read_array(attack_count, _read_class_amount)

    armor_count = stream.read_u16()
    armors = stream.read_array(armor_count, _read_class_amount)

    terrain_restriction = stream.read_i16()
    max_range = stream.read_f32()
    blast_width = stream.read_f32()
    reload_time = stream.read_f32()
    projectile_unit_id = stream.read_i16()
    accuracy_percent = stream.read_i16()
    tower_mode = stream.read_i8()
    frame_delay = stream.read_i16()
    graphic_displacements = tuple(stream.read_f32() for _ in range(GRAPHIC_DISPLACEMENT_COUNT))
    return BattleParams(
        default_armor=default_armor,
        attacks=attacks,
        armors=armors,
        terrain_restriction_for_damage_multiplier=terrain_restriction,
        max_range=max_range,
        blast_width=blast_width,
        reload_time=reload_time,
        projectile_unit_id=projectile_unit_id,
        accuracy_percent=accuracy_percent,
        tower_mode=tower_mode,
        frame_delay=frame_delay,
        graphic_displacements=graphic_displacements,
        blast_attack_level=stream.read_i8(),
        min_range=stream.read_f32(),
        attack_graphic=stream.read_i16(),
        displayed_melee_armour=stream.read_i16(),
        displayed_attack=stream.read_i16(),
        displayed_range=stream.read_f32(),
        displayed_reload_time=stream.read_f32(),
    )


def read_projectile_params(stream: DatStream) -> ProjectileParams:
    stretch_mode = stream.read_i8()
    smart_mode = stream.read_i8()
    drop_animation_mode = stream.read_i8()
    penetration_mode = stream.read_i8()
    stream.skip(1)  # unknown u8
    return ProjectileParams(
        stretch_mode=stretch_mode,
        smart_mode=smart_mode,
        drop_animation_mode=drop_animation_mode,
        penetration_mode=penetration_mode,
        projectile_arc=stream.read_f32(),
    )


def read_resource_cost(stream: DatStream) -> ResourceCost:
    return ResourceCost(
        type_id=stream.read_i16(),
        amount=stream.read_i16(),
        enabled=stream.read_bool_u16(),
    )


def read_trainable_params(stream: DatStream) -> TrainableParams:
    """Decode the trainable block. Always exactly three resource costs."""
    return TrainableParams(
        resource_costs=stream.read_array(RESOURCE_COST_COUNT, read_resource_cost),
        train_time=stream.read_i16(),
        train_location_id=stream.read_i16(),
        button_id=stream.read_i8(),
        displayed_pierce_armor=stream.read_i16(),
    )


def read_building_params(stream: DatStream) -> BuildingParams:
    return BuildingParams(
        construction_graphic_id=stream.read_i16(),
        adjacent_mode=stream.read_i8(),
        graphics_angle=stream.read_i16(),
        disappears_when_built=stream.read_bool_u8(),
        stack_unit_id=stream.read_i16(),
        foundation_terrain_id=stream.read_i16(),
        old_terrain_id=stream.read_i16(),
        research_id=stream.read_i16(),
        construction_sound=stream.read_i16(),
    )
