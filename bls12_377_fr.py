"""BLS12-377 scalar field Fr.

The tables below are build-time artifacts produced by ``fp256_gen``. Importing
this module re-derives every constant from MODULUS and the generator and
fails with ConstantMismatch if any table entry has drifted.

    q = 8444461749428370424248824938781546531375899335154063827935233455917409239041
    q - 1 = 2^47 * 3 * 5 * 7 * 13 * 499 * 958612291309063373 * 9586122913090633729^2
"""

from fp256_element import PrimeFieldElement
from fp256_fft import verify_published
from fp256_mont import MontgomeryArithmeticEngine
from fp256_params import ModulusParameters
from fp256_poseidon import PoseidonParameterEntry, PoseidonParameterTable

MODULUS_INT = 8444461749428370424248824938781546531375899335154063827935233455917409239041

# odd part of q - 1, as (prime, multiplicity)
T_FACTORS = ((3, 1), (5, 1), (7, 1), (13, 1), (499, 1), (958612291309063373, 1), (9586122913090633729, 2))

MODULUS = (725501752471715841, 6461107452199829505, 6968279316240510977, 1345280370688173398)
MODULUS_BITS = 253
CAPACITY = MODULUS_BITS - 1
REPR_SHAVE_BITS = 3

R = (9015221291577245683, 8239323489949974514, 1646089257421115374, 958099254763297437)
R2 = (2726216793283724667, 14712177743343147295, 12091039717619697043, 81024008013859129)
INV = 725501752471715839

# 22 * R % q
GENERATOR_INT = 22
GENERATOR = (2984901390528151251, 10561528701063790279, 5476750214495080041, 898978044469942640)

# q - 1 = 2^s * t
TWO_ADICITY = 47
T = (0xedfda00000021423, 0x9a3cb86f6002b354, 0xcabd34594aacc168, 0x2556)
T_MINUS_ONE_DIV_TWO = (0x76fed00000010a11, 0x4d1e5c37b00159aa, 0x655e9a2ca55660b4, 0x12ab)
MODULUS_MINUS_ONE_DIV_TWO = (0x8508c00000000000, 0xacd53b7f68000000, 0x305a268f2e1bd800, 0x955b2af4d1652ab)

# 22^t = 8065159656716812877374967518403273466521432693661810619979959746626482506078, times R % q
TWO_ADIC_ROOT_OF_UNITY = (12646347781564978760, 6783048705277173164, 268534165941069093, 1121515446318641358)

# (TWO_ADIC_ROOT_OF_UNITY^t)^(2^i) for i in 0..TWO_ADICITY-2, canonical form
POWERS_OF_G = (
    (10328383819076220041, 14191591508846097093, 12501134559794337047, 86910565973793808),
    (8860509688463634423, 1987637956085362503, 13747388016533910673, 576114928986390863),
    (17832370440353462201, 18333106810824263321, 592081709184052627, 1124009604792067551),
    (1367222650021696822, 1672322518064107775, 10078960202391419581, 986487607474991126),
    (7801994457662355801, 1836364555646277854, 5564941731559901330, 137071134080593267),
    (1627872368810536665, 7561244056243702343, 7398253825307092333, 492579031612513421),
    (2174016681181728162, 10505838485506869491, 16610720311795037309, 1098422320772082154),
    (14337306730171611076, 12442514747166259275, 17248308783327290044, 823884278180763119),
    (15696010754873740657, 13141345562885611284, 9680036141109855441, 887505112900742727),
    (14117995369707848741, 2676544868778200817, 15381510150427907877, 257498018850372776),
    (8075389433991515579, 16916339557505807697, 11298360946530060764, 1122123836554287848),
    (10342888282698021604, 12403284485547111431, 14696235823030357764, 838681669075417381),
    (3300847203551844483, 3339409470471498824, 13654830630444755558, 707677572403360065),
    (3808737952027303658, 8968531274175594265, 8106831138537735386, 95940273114358519),
    (15286725442987323933, 2007106475361142923, 2083317292372149883, 180974583549619563),
    (4397199371149633379, 2642875832121143872, 10413799076104686281, 825642426606926497),
    (8774224414660521854, 18365829392473779644, 8655911966341339463, 684365345904928200),
    (10806033142992442180, 3075668854507278742, 8979520784635433375, 850542396786602444),
    (9597527489463497832, 2333761960726968730, 16746112055805176011, 720722047058011984),
    (11665299291901935400, 17182857005450655341, 4636328355928986639, 367772762952845550),
    (8069337352849774732, 6810387472871013908, 12557276942623517253, 1071767776870672597),
    (289374981952860296, 10127025435713098654, 2208729361928340935, 1150687475564240568),
    (15093304075973936383, 9776219015851785266, 11568887383937677886, 1006739033513003763),
    (1150486120695289571, 3791543346167510731, 8613032656732926571, 813839133560734466),
    (16839302334653569483, 7806350610692982781, 9943056458881994391, 929704394376454922),
    (10144789091081869880, 5276676660904173699, 11321786778118072766, 828040235651688951),
    (14026679459268555543, 17614867463469069595, 3844728541758442592, 1281214418221255993),
    (5610429035363378761, 5506683230076607326, 15435736246316713183, 630199525257939000),
    (2091185604097662362, 17127246870944143349, 5486761434399919491, 1279919528069553426),
    (13424026958577531300, 15479473384426506037, 17001359710774047057, 625354898110673901),
    (13755737776659122100, 7812729316127440458, 9523938547420537112, 648137986191484461),
    (1165812272695901547, 12477727142090267391, 2985602208663590731, 1045963240577762725),
    (11386823563897388805, 8996428867051358375, 17407367155104854965, 902542683321490548),
    (14207807180461846907, 2977462516520395126, 8289854015104591870, 838036922954485384),
    (8702429858031186294, 9896991137985631698, 11452212551647075484, 1112923889600286310),
    (11868334807536044594, 11338331136471586738, 8983503108370834649, 144895927838607475),
    (14325615367965009586, 651112296219242760, 8607802202904885190, 487010021762658902),
    (14813624617275070509, 2882077349404717420, 5680560839221873456, 18496147629218790),
    (3860813008363005562, 13070289317452546120, 16177474974163429734, 905589341506001309),
    (10635157538079540293, 14558775325840713906, 6285603727816758609, 1072054636653083005),
    (14131499561750797534, 3603585501749045744, 6654910081877801363, 131121550043178146),
    (2308547058138155728, 14611290591686694966, 14498629415485764736, 399365686344451181),
    (216042469711036291, 14712225719724588293, 18327253858955787988, 1257556734790442820),
    (1623908135086529229, 13407327894380134160, 8948411873392033406, 1141416569028784275),
    (4618273137458433979, 9101316775941478578, 3857472798808877274, 314321949662526359),
    (8860621160618917888, 9963140610363752447, 4379532757234729984, 1345280370688173398),
)

POSEIDON_PARAMS_OPT_FOR_CONSTRAINTS = (
    PoseidonParameterEntry(2, 17, 8, 31, 0),
    PoseidonParameterEntry(3, 17, 8, 31, 0),
    PoseidonParameterEntry(4, 17, 8, 31, 0),
    PoseidonParameterEntry(5, 17, 8, 31, 0),
    PoseidonParameterEntry(6, 17, 8, 31, 0),
    PoseidonParameterEntry(7, 17, 8, 31, 0),
    PoseidonParameterEntry(8, 17, 8, 31, 0),
)

FR_PARAMETERS = ModulusParameters.new(
    MODULUS_INT,
    GENERATOR_INT,
    modulus=MODULUS,
    modulus_bits=MODULUS_BITS,
    capacity=CAPACITY,
    repr_shave_bits=REPR_SHAVE_BITS,
    r=R,
    r2=R2,
    inv=INV,
    generator=GENERATOR,
    two_adicity=TWO_ADICITY,
    t=T,
    t_minus_one_div_two=T_MINUS_ONE_DIV_TWO,
    modulus_minus_one_div_two=MODULUS_MINUS_ONE_DIV_TWO,
    two_adic_root_of_unity=TWO_ADIC_ROOT_OF_UNITY,
)
FR_ENGINE = MontgomeryArithmeticEngine(FR_PARAMETERS)
FR_TOWER = verify_published(FR_ENGINE, FR_PARAMETERS, POWERS_OF_G)
FR_POSEIDON = PoseidonParameterTable(POSEIDON_PARAMS_OPT_FOR_CONSTRAINTS)


class Fr(PrimeFieldElement):
    ENGINE = FR_ENGINE
